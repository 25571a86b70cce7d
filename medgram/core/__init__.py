from medgram.core.logger import logger, configure_logging, register_logger

__all__ = ["logger", "configure_logging", "register_logger"]
