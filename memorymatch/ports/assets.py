"""
Asset Port - Card image lookup.

The engine stores only numeric image ids; this port turns them into
something a front end can draw (path + display name). Catalogs are built
once at startup and passed to the controller.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
import logging
import re

from ..engine_core.deck import ImageRef

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
CARD_BACK_PATH = "/Back Side.jpg"
DEFAULT_ALT_TEXT = "Card"

IMPRESSIONIST_PATHS = [
    "/cards/A Sunday Afternoon on the Island of La Grande Jatte, Georges Seurat, 1884.jpg",
    "/cards/Mont Sainte-Victoire, Paul Cézanne, c. 1890s.jpg",
    "/cards/Jeanne Samary in a Low-Necked Dress, Pierre-Auguste Renoir, 1877.jpg",
    "/cards/Children Playing on the Beach, Mary Cassatt, 1884.jpg",
    "/cards/The Green Line, Henri Matisse, 1905.jpg",
    "/cards/The Starry Night, Vincent van Gogh, 1889.jpg",
    "/cards/Le Déjeuner sur l'herbe, Édouard Manet, 1863.jpg",
    "/cards/Dance at Bougival, Pierre-Auguste Renoir, 1883.jpg",
    "/cards/The Ballet Class, Edgar Degas, 1873.jpg",
    "/cards/Boulevard Montmartre, Spring, Camille Pissarro, 1897.jpg",
    "/cards/At the Moulin Rouge - The Dance, Henri de Toulouse-Lautrec, 1890.jpg",
    "/cards/Impression Sunrise, Claude Monet, 1872.jpg",
]

ROBGON_PATHS = [f"/cards/robgon/RobGon {n:02d}.jpg" for n in range(1, 13)]

THEMES: dict[str, list[str]] = {
    "impressionist": IMPRESSIONIST_PATHS,
    "robgon": ROBGON_PATHS,
}


@dataclass(frozen=True)
class CardImage:
    """Renderable card face."""
    id: int
    name: str
    path: str

    def to_ref(self) -> ImageRef:
        return ImageRef(id=self.id, name=self.name, path=self.path)


def extract_name_from_path(path: str) -> str:
    """
    Display name from an image file path.

    Takes the file name without extension, keeps the text before the first
    comma and at most its first three words:
    "/cards/The Starry Night, Vincent van Gogh, 1889.jpg" -> "The Starry Night"
    """
    filename = path.replace("\\", "/").split("/")[-1]
    stem = re.sub(r"\.[^.]+$", "", filename)
    words = stem.split(",")[0].strip().split(" ")
    return " ".join(words[:3])


def create_card_image(path: str, index: int) -> CardImage:
    """Image ids are 1-based positions in the catalog."""
    return CardImage(id=index + 1, name=extract_name_from_path(path), path=path)


class ImageCatalog(ABC):
    """Abstract image port."""

    @abstractmethod
    def get_all_images(self) -> list[CardImage]:
        pass

    def get_image_by_id(self, image_id: int) -> CardImage | None:
        for image in self.get_all_images():
            if image.id == image_id:
                return image
        return None

    def get_back_image_path(self) -> str:
        return CARD_BACK_PATH

    def get_card_pairs(self) -> list[CardImage]:
        """Each image twice, in catalog order."""
        return [image for image in self.get_all_images() for _ in range(2)]

    def choose_images(self, pair_count: int) -> list[ImageRef]:
        """
        The first `pair_count` images as engine refs.

        Returns fewer when the catalog is too small; initialize_game()
        then rejects the count.
        """
        return [image.to_ref() for image in self.get_all_images()[:pair_count]]

    def alt_text(self, image_id: int) -> str:
        image = self.get_image_by_id(image_id)
        return image.name if image else DEFAULT_ALT_TEXT


class StaticImageCatalog(ImageCatalog):
    """Catalog over a fixed list of paths (the built-in themes)."""

    def __init__(self, paths: list[str], back_image_path: str = CARD_BACK_PATH):
        self._images = [create_card_image(p, i) for i, p in enumerate(paths)]
        self._back = back_image_path

    @classmethod
    def for_theme(cls, theme: str) -> StaticImageCatalog:
        """Catalog for a built-in theme; unknown themes fall back to the default."""
        paths = THEMES.get(theme)
        if paths is None:
            logger.warning(f"Unknown theme {theme!r}, using impressionist")
            paths = IMPRESSIONIST_PATHS
        return cls(paths)

    def get_all_images(self) -> list[CardImage]:
        return list(self._images)

    def get_back_image_path(self) -> str:
        return self._back


class DirectoryImageCatalog(ImageCatalog):
    """
    Catalog over the image files of a directory (sorted by file name).

    Paths are reported relative to `url_prefix` so a static file server
    can serve them.
    """

    def __init__(self, directory: str | Path, url_prefix: str = "/cards"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self._images: list[CardImage] | None = None

    def get_all_images(self) -> list[CardImage]:
        if self._images is None:
            self._images = self._load()
        return list(self._images)

    def _load(self) -> list[CardImage]:
        if not self.directory.is_dir():
            logger.error(f"Image directory not found: {self.directory}")
            return []
        files = sorted(
            p for p in self.directory.iterdir()
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
        )
        images = [
            create_card_image(f"{self.url_prefix}/{p.name}", i)
            for i, p in enumerate(files)
        ]
        logger.info(f"Loaded {len(images)} card images from {self.directory}")
        return images


def catalog_for(theme: str, image_dir: str | None = None) -> ImageCatalog:
    """Pick a directory catalog when configured, else a built-in theme."""
    if image_dir:
        return DirectoryImageCatalog(Path(image_dir) / theme)
    return StaticImageCatalog.for_theme(theme)
