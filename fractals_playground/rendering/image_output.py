"""
Image export for rendered fractal surfaces.

This module writes surfaces to PNG or JPEG through Pillow, embedding the
render parameters as PNG text chunks (or a companion JSON file for JPEG) so
a saved view can be identified later.
"""

from typing import Dict, Any, Optional, Tuple, Union
from pathlib import Path
from dataclasses import dataclass, asdict, field
import json
import logging
from datetime import datetime

from PIL import Image, PngImagePlugin

from .surface import Surface, ImageSurface, RecordingSurface

logger = logging.getLogger(__name__)

SOFTWARE_VERSION = "1.0.0"


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""

    fractal_type: str
    focus: Tuple[float, float]
    radius: float
    resolution: Tuple[int, int]  # width, height

    render_time_seconds: float = 0.0
    thumbnail: bool = False

    timestamp: str = ""
    software_version: str = SOFTWARE_VERSION

    fractal_parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()
        self.focus = tuple(self.focus)
        self.resolution = tuple(self.resolution)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


def surface_to_image(surface: Surface) -> Image.Image:
    """Get a Pillow image of a surface's pixels."""
    if isinstance(surface, ImageSurface):
        return surface.image.copy()
    if isinstance(surface, RecordingSurface):
        return Image.fromarray(surface.pixels.copy())
    raise ValueError(f"Cannot export surface of type {type(surface).__name__}")


class ImageExporter:
    """Image export with metadata support."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
        }

    def save_surface(self, surface: Surface, filepath: Union[str, Path],
                     metadata: Optional[RenderMetadata] = None,
                     quality: int = 95) -> Path:
        """
        Save a rendered surface to file with metadata.

        Args:
            surface: Rendered surface
            filepath: Output file path
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)

        Returns:
            The path written
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise ValueError(f"Unsupported format '{suffix}'. Supported: {supported}")

        pil_image = surface_to_image(surface)

        save_method = self.supported_formats[suffix]
        save_method(pil_image, filepath, metadata, quality)

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath

    def _save_png(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as PNG with metadata."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Title", f"Fractal: {metadata.fractal_type}")
            pnginfo.add_text("Software", f"FractalsPlayground v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_jpeg(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as JPEG; metadata goes to a companion JSON file."""
        pil_image.convert('RGB').save(filepath, "JPEG", quality=quality, optimize=True)

        if metadata:
            json_path = filepath.with_suffix('.json')
            with open(json_path, 'w') as f:
                f.write(metadata.to_json())
            logger.info(f"Saved metadata: {json_path}")

    def extract_metadata_from_image(self, filepath: Union[str, Path]) -> Optional[RenderMetadata]:
        """
        Extract fractal metadata from saved image.

        Args:
            filepath: Path to image file

        Returns:
            Extracted metadata or None
        """
        filepath = Path(filepath)

        with Image.open(filepath) as img:
            text = getattr(img, 'text', None) or {}
            if 'FractalMetadata' in text:
                return RenderMetadata.from_json(text['FractalMetadata'])

        if filepath.suffix.lower() in ['.jpg', '.jpeg']:
            json_path = filepath.with_suffix('.json')
            if json_path.exists():
                with open(json_path, 'r') as f:
                    return RenderMetadata.from_json(f.read())

        return None
