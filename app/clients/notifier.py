import logging

logger = logging.getLogger(__name__)


class Notifier:
    """Mensajes para el usuario (toasts). No deben interrumpir el flujo."""

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        if variant == "destructive":
            logger.warning(f"{title}: {description}")
        else:
            logger.info(f"{title}: {description}")
