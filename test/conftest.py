from pathlib import Path

import pytest

from pipeline.options import PipelineOptions
from pipeline.types import CatalogStar, PipelineOutput, Star, StarIdentifier
from session.errors import ImageLoadFailure
from session.frame_generator import FrameGenerator
from session.sequence_builder import SequenceBuilder


CATALOG = tuple(CatalogStar(ra=float(i), dec=0.0, magnitude=3.0, name=f"S{i}") for i in range(20))


class FakePipeline:
    def __init__(self, engine, options):
        self.engine = engine
        self.options = options

    def go(self, inputs):
        call = self.engine.calls
        self.engine.calls += 1
        self.engine.targets.append(self.options.target)
        if call in self.engine.empty_on_calls:
            return []
        return [PipelineOutput(
            attitude=self.options.target,
            stars=(
                Star(10, 10, 1, 1, 3.0),
                Star(20, 20, 1, 1, 4.0),
                Star(30, 30, 1, 1, 5.0),
            ),
            star_ids=(StarIdentifier(0, 10), StarIdentifier(2, 12)),
            catalog=CATALOG,
        )]


class FakeEngine:
    """
    Pipeline engine stand-in. Returns no output on the `empty_on_calls` call
    numbers and fails to write images on the `unwritable_on_calls` ones.
    """

    def __init__(self, empty_on_calls=(), unwritable_on_calls=()):
        self.empty_on_calls = set(empty_on_calls)
        self.unwritable_on_calls = set(unwritable_on_calls)
        self.calls = 0
        self.targets = []
        self.compared = []

    def get_pipeline_input(self, options):
        return ["input"]

    def set_pipeline(self, options):
        return FakePipeline(self, options)

    def compare_outputs(self, inputs, outputs, options):
        if self.calls - 1 in self.unwritable_on_calls:
            raise PermissionError(f"read-only: {options.plot_raw_input}")
        self.compared.append(options.plot_raw_input)


class FakeLoader:
    """In-memory image loader; paths whose name is in `broken` fail."""

    def __init__(self, broken=()):
        self.broken = set(broken)
        self.loaded = []

    def __call__(self, path):
        path = Path(path)
        if path.name in self.broken:
            raise ImageLoadFailure(f"broken: {path}")
        self.loaded.append(path.name)
        return f"image:{path.name}"


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def loader():
    return FakeLoader()


@pytest.fixture
def make_builder(tmp_path):
    def _make(engine):
        return SequenceBuilder(FrameGenerator(engine, PipelineOptions(), tmp_path))
    return _make
