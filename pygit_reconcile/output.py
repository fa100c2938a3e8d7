"""Output handler implementations: console, null, buffered."""

from __future__ import annotations

from colorama import Fore, Style
from tqdm import tqdm

SECTION_WIDTH = 48


class ConsoleOutputHandler:
    """Console output with colors."""

    def __init__(self, verbose: bool = False):
        """Create a console handler. Set verbose=True to enable debug output."""
        self.verbose = verbose

    def info(self, message: str, indent: int = 0) -> None:
        """Print an informational message."""
        tqdm.write("  " * indent + f"{Fore.BLUE}[INFO]{Style.RESET_ALL} {message}" if message else "")

    def success(self, message: str, indent: int = 0) -> None:
        """Print a green success message."""
        tqdm.write("  " * indent + f"{Fore.GREEN}{message}{Style.RESET_ALL}")

    def warning(self, message: str, indent: int = 0) -> None:
        """Print a yellow warning message."""
        tqdm.write("  " * indent + f"{Fore.YELLOW}{message}{Style.RESET_ALL}")

    def error(self, message: str, indent: int = 0) -> None:
        """Print a red error message."""
        tqdm.write("  " * indent + f"{Fore.RED}{message}{Style.RESET_ALL}")

    def section(self, title: str) -> None:
        """Print a section header between divider lines."""
        tqdm.write("=" * SECTION_WIDTH)
        tqdm.write(title.center(SECTION_WIDTH).rstrip())
        tqdm.write("=" * SECTION_WIDTH)

    def debug(self, message: str) -> None:
        """Print a cyan debug message (only when verbose is enabled)."""
        if self.verbose:
            tqdm.write(f"{Fore.CYAN}[DEBUG] {message}{Style.RESET_ALL}")


class NullOutputHandler:
    """Silent output handler for testing."""

    def info(self, message: str, indent: int = 0) -> None:
        """No-op."""
        pass

    def success(self, message: str, indent: int = 0) -> None:
        """No-op."""
        pass

    def warning(self, message: str, indent: int = 0) -> None:
        """No-op."""
        pass

    def error(self, message: str, indent: int = 0) -> None:
        """No-op."""
        pass

    def section(self, title: str) -> None:
        """No-op."""
        pass

    def debug(self, message: str) -> None:
        """No-op."""
        pass


class BufferedOutputHandler:
    """Collects plain-text messages instead of printing them (used in JSON mode)."""

    def __init__(self):
        """Initialize with an empty message buffer."""
        self.messages: list[str] = []

    def info(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def success(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def warning(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def error(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def section(self, title: str) -> None:
        self.messages.append(title)

    def debug(self, message: str) -> None:
        """No-op (debug is not captured)."""
        pass
