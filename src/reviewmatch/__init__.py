"""ReviewMatch - Vérification des avis clients publiés sur la marketplace."""

from reviewmatch.config import ConfigError, ConfigFileError, ReviewMatchError
from reviewmatch.io_tabular import TabularFileError
from reviewmatch.parser import EmptyInputError, MissingColumnError, ParseError

__all__ = [
    "__version__",
    "ReviewMatchError",
    "ConfigError",
    "ConfigFileError",
    "TabularFileError",
    "ParseError",
    "EmptyInputError",
    "MissingColumnError",
]

__version__ = "0.1.0"
