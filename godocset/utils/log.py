"""
Logging utilities for the docset builder.

Provides colorful CLI logging using the rich library.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


# Global console instance
console = Console()

# Root of every logger handed out by get_logger
ROOT_LOGGER = "godocset"

# Logger instances cache
_loggers: dict = {}

# Set by setup_logger; silences the console helpers below
_quiet = False


def setup_logger(
    name: str = ROOT_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger with rich formatting.
    
    Child loggers created by get_logger propagate to this one, so calling
    this once for the root name configures the whole package.
    
    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path to write logs
        
    Returns:
        Configured logger instance
    """
    global _quiet

    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Clear existing handlers
    logger.handlers.clear()
    
    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    
    # File handler if specified
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    
    if name == ROOT_LOGGER:
        _quiet = level > logging.INFO

    _loggers[name] = logger
    return logger


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for a component of the package.
    
    Args:
        component: Component name, e.g. "grabber"; None for the root logger
        
    Returns:
        Logger instance named ``godocset.<component>``
    """
    name = f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


def print_status(message: str, style: str = "bold blue") -> None:
    """
    Print a styled status message.
    
    Args:
        message: Message to print
        style: Rich style string
    """
    if not _quiet:
        console.print(f"[{style}]{escape(message)}[/{style}]")


def print_error(message: str) -> None:
    """
    Print an error message. Errors are printed even in silent mode.
    
    Args:
        message: Error message to print
    """
    console.print(f"[bold red]❌ {escape(message)}[/bold red]")


def print_success(message: str) -> None:
    """
    Print a success message.
    
    Args:
        message: Success message to print
    """
    print_status(f"✅ {message}", "bold green")


def print_warning(message: str) -> None:
    """
    Print a warning message.
    
    Args:
        message: Warning message to print
    """
    print_status(f"⚠️ {message}", "bold yellow")


def print_info(message: str) -> None:
    """
    Print an info message.
    
    Args:
        message: Info message to print
    """
    print_status(f"ℹ️ {message}", "bold cyan")
