class FrameGenerationFailure(Exception):
    """One frame could not be produced; the sequence carries on without it."""


class EmptyPipelineResult(FrameGenerationFailure):
    """The pipeline produced no output for the requested orientation."""


class FrameWriteFailure(FrameGenerationFailure):
    """The frame images could not be written to the output directory."""


class ImageLoadFailure(Exception):
    """A persisted frame image is missing or cannot be decoded."""


class EmptyTimeline(Exception):
    """Navigation requested on a timeline without frames."""
