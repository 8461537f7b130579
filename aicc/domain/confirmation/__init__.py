from aicc.domain.confirmation.confirmer import AutoConfirmer, Confirmer

__all__ = ["AutoConfirmer", "Confirmer"]
