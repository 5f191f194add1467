"""Line, character and optional token counts for the aggregated document.

Token counting uses OpenAI's tiktoken library, installed through the optional
``token_counting`` extra. Without it, or without a model name, only lines and
characters are counted and token totals are reported as None.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from dirflatten.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


def tiktoken_available() -> bool:
    """Check if the tiktoken library is importable."""
    return importlib.util.find_spec("tiktoken") is not None


class TokenCounter:
    """Running totals of lines, characters and (optionally) tokens.

    Attributes:
        model (Optional[str]): Model whose tokenizer is used, or None when tokens are not counted.
        encoder (Optional[Any]): The tiktoken encoding, when token counting is enabled.

    Example:
        >>> counter = TokenCounter()
        >>> counter.count("## a.txt\\nhello\\n")
        CountResult(lines=2, tokens=None, characters=15)
        >>> counter.get_total_lines(), counter.get_total_characters(), counter.get_total_tokens()
        (2, 15, None)

    Raises:
        TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
        ValueError: If tiktoken does not know the model.
    """

    def __init__(self, model: Optional[str] = None):
        self.model = model
        self.encoder: Optional[Any] = None

        if self.model is not None:
            if not tiktoken_available():
                raise TokenizerNotAvailableError(
                    f"Token counting was requested for model '{self.model}', but tiktoken is not installed."
                )
            self.encoder = self._get_encoder(self.model)

        self._total_tokens: Optional[int] = None if self.encoder is None else 0
        self._total_lines = 0
        self._total_characters = 0

    @staticmethod
    def _get_encoder(model: str) -> Any:
        # Imported lazily so the package works without the token_counting extra
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider using a well-supported model "
                "like 'gpt-4' (cl100k_base encoding) for an approximate token count."
            )

    def count(self, text: str) -> CountResult:
        """Count the lines, characters and tokens of ``text`` and add them to the totals.

        Raises:
            TokenizationError: If token counting is enabled but the encoder fails. Line and
                character totals are still updated.
        """
        lines = text.count("\n")
        characters = len(text)
        self._total_lines += lines
        self._total_characters += characters

        tokens = None
        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {str(e)}")
            self._total_tokens = (self._total_tokens or 0) + tokens

        return CountResult(lines=lines, tokens=tokens, characters=characters)

    def get_total_tokens(self) -> Optional[int]:
        return self._total_tokens

    def get_total_lines(self) -> int:
        return self._total_lines

    def get_total_characters(self) -> int:
        return self._total_characters
