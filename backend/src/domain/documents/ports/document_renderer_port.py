"""Document Renderer Port - Domain interface for producing declaration files."""

from abc import ABC, abstractmethod
from pathlib import Path


class DocumentRendererPort(ABC):
    """Turns rendered declaration text into a paginated document."""

    #: File extension of the produced artifact (without dot)
    extension: str = "pdf"

    #: MIME type of the produced artifact
    content_type: str = "application/pdf"

    @abstractmethod
    def render(self, title: str, body: str, footer: str, destination: Path) -> bytes:
        """Render a document to destination and return its bytes.

        Args:
            title: Declaration title (title block)
            body: Body text with placeholders already substituted
            footer: Footer text with placeholders already substituted
            destination: Scratch file the document is written to

        Returns:
            bytes: The finished document

        Raises:
            RenderError: If the destination cannot be finalized or is empty
        """
        pass
