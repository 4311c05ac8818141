"""Exception hierarchy for ridgeprint runs."""


class RidgeprintError(Exception):
    """Base exception for ridgeprint errors."""
    pass


class DatasetError(RidgeprintError):
    """Input dataset is missing, unreadable, or not numeric."""
    pass


class DataShapeError(DatasetError):
    """A row does not match the matrix column count."""
    pass


class ConfigurationError(RidgeprintError):
    """Configuration values cannot produce a valid job."""
    pass


class OutputDirectoryError(RidgeprintError):
    """An output directory could not be provisioned."""
    pass


class GeometryError(RidgeprintError):
    """Profile geometry cannot be laid out."""
    pass


class PartTooLargeError(GeometryError):
    """A single profile does not fit on an empty print bed."""
    pass


class RenderError(RidgeprintError):
    """One or more render jobs failed."""
    pass


class RendererNotFoundError(RenderError):
    """The render engine executable could not be started."""
    pass
