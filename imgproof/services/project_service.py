from typing import Optional

from ..models.layer import ImageProject, Layer
from ..models.transformation import Transformation
from ..repositories.image_repository import ImageRepository
from .transformation_service import TransformationService
from ..exceptions import LayerIndexError


class ProjectService:
    """
    Layer bookkeeping for an editing project. Each layer owns one image and
    is transformed independently.
    """

    def __init__(self, transformation_service: Optional[TransformationService] = None):
        self.image_repository = ImageRepository()
        self.transformation_service = transformation_service or TransformationService()

    def add_layer(self, project: ImageProject, image_data: bytes) -> Layer:
        layer = Layer(self.image_repository.decode(image_data))
        project.layers.append(layer)
        return layer

    def add_empty_layer(self, project: ImageProject, width: int, height: int) -> Layer:
        layer = Layer(self.image_repository.create_empty(width, height))
        project.layers.append(layer)
        return layer

    def transform_layer(self, project: ImageProject, index: int, transformation: Transformation) -> Layer:
        layer = self._get(project, index)
        self.transformation_service.apply(layer.image, transformation)
        return layer

    def get_layer(self, project: ImageProject, index: int, fmt: Optional[str] = None) -> bytes:
        """Encoded layer bytes; 'jpeg' and 'webp' are honoured, anything else is PNG."""
        layer = self._get(project, index)
        fmt = fmt if fmt in ("jpeg", "webp") else "png"
        return self.image_repository.encode(layer.image, fmt)

    @staticmethod
    def _get(project: ImageProject, index: int) -> Layer:
        if not 0 <= index < len(project.layers):
            raise LayerIndexError(f"Layer index {index} out of bounds ({len(project.layers)} layers)")
        return project.layers[index]
