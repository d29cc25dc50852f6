"""
Image tier columns shared by the character and issue tables.
"""
from typing import Any, Dict, Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from comicshelf.providers.models import ImageSet


class ImageColumnsMixin:
    """One nullable column per ComicVine image tier."""

    icon_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    medium_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    screen_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    screen_large_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    small_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    super_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumb_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tiny_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    original_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @staticmethod
    def image_values(image: ImageSet) -> Dict[str, Any]:
        """Column values for ``image``."""
        return image.model_dump()
