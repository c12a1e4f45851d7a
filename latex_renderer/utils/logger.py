# latex_renderer/utils/logger.py

import logging
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, Union
from functools import wraps

from ..models.types import ProcessingPhase, ProcessingError


class RendererLogger:
    """Centralized logging for the LaTeX rendering pipeline."""

    def __init__(
        self,
        name: str = "latex_renderer",
        log_file: Optional[Union[str, Path]] = None,
        log_level: int = logging.DEBUG,
        console_output: bool = True
    ):
        self.logger = logging.getLogger(name)
        self._setup_logger(log_file, log_level, console_output)

    def _setup_logger(
        self,
        log_file: Optional[Union[str, Path]],
        log_level: int,
        console_output: bool
    ) -> None:
        """Configure logging with proper formatters."""
        self.logger.setLevel(log_level)

        # Handlers are attached once per named logger
        if self.logger.handlers:
            return

        console_format = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )
        file_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        if console_output:
            console = logging.StreamHandler()
            console.setLevel(logging.INFO)
            console.setFormatter(console_format)
            self.logger.addHandler(console)

        if log_file:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(file_path))
            file_handler.setLevel(log_level)
            file_handler.setFormatter(file_format)
            self.logger.addHandler(file_handler)

    # Standard logging interface
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(msg, *args, **kwargs)

    def log_phase_start(self, phase: ProcessingPhase, context: Dict[str, Any]) -> None:
        """Log the start of a processing phase."""
        self.logger.debug(
            f"Starting {phase.value} phase - "
            f"Input length: {context.get('input_length', 'N/A')}"
        )

    def log_phase_end(self, phase: ProcessingPhase, context: Dict[str, Any]) -> None:
        """Log the end of a processing phase."""
        self.logger.debug(f"Completed {phase.value} phase")

    def log_error(self, error: ProcessingError, phase: Optional[ProcessingPhase] = None) -> None:
        """Log processing error with context."""
        error_msg = (
            f"Error during {phase.value if phase else 'processing'}: "
            f"{error.message}\n"
            f"Context: {error.context}\n"
            f"Element: {error.element_id or 'N/A'}"
        )

        if error.stacktrace:
            error_msg += f"\nStacktrace:\n{error.stacktrace}"

        self.logger.error(error_msg)

    def create_error_log(self, e: Exception, context: Dict[str, Any]) -> None:
        """Create comprehensive error log entry."""
        self.logger.error(
            "Error Details:\n"
            f"Timestamp: {datetime.now().isoformat()}\n"
            f"Error Type: {type(e).__name__}\n"
            f"Message: {str(e)}\n"
            f"Context: {context}\n"
            f"Stacktrace:\n{traceback.format_exc()}"
        )


def log_processing_phase(phase: ProcessingPhase):
    """Decorator for logging processing phases."""
    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            source = args[0] if args and isinstance(args[0], str) else None
            context = {
                'input_length': len(source) if source is not None else None
            }

            self.logger.log_phase_start(phase, context)
            try:
                result = func(self, *args, **kwargs)
                self.logger.log_phase_end(phase, context)
                return result
            except Exception as e:
                if isinstance(e, ProcessingError):
                    self.logger.log_error(e, phase)
                else:
                    self.logger.create_error_log(e, {
                        'phase': phase.value,
                        'function': func.__name__
                    })
                raise
        return wrapper
    return decorator
