"""Exception types raised by the asset pipeline."""


class AssetPipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(AssetPipelineError):
    """Configuration file could not be used."""


class SourceNotFoundError(AssetPipelineError):
    """A root directory given to the pipeline or verifier does not exist."""


class TraversalError(AssetPipelineError):
    """A directory could not be listed. Aborts the whole run."""


class SymlinkCycleError(TraversalError):
    """A symlinked directory points back into its own ancestry."""

    def __init__(self, path, target):
        super().__init__(f"Symlink cycle: {path} re-enters {target}")
        self.path = path
        self.target = target


class UnsupportedSourceError(AssetPipelineError):
    """The active converter has no rule for this input extension."""

    def __init__(self, path, converter: str):
        super().__init__(f"{converter} converter cannot handle {path}")
        self.path = path
        self.converter = converter
