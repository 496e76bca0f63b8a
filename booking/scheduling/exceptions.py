class SlotConfigurationError(ValueError):
    """Configuração de agenda inválida (erro de cadastro, não falta de horário)."""
