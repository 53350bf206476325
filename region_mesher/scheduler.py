"""
Stepwise mesh building.

Detection has to finish in one go, but mesh building splits naturally
into one independent unit of work per region. This module exposes that
split so a caller can build one region, do something else (redraw a
progress bar, wait a frame, check for cancel), then build the next.

Nothing here knows about clocks except run_paced(), which is the thin
caller-side loop that inserts the pause between steps.
"""

import logging
import time
from typing import Callable, Iterator, List, Optional, Sequence

from .mesh_builder import Mesh, build_region_mesh
from .region_detector import Region

logger = logging.getLogger(__name__)


class MeshStep:
    """Result of one build step: the region and the mesh built from it."""

    def __init__(self, index: int, region: Region, mesh: Mesh):
        self.index = index
        self.region = region
        self.mesh = mesh

    def __repr__(self) -> str:
        return f"MeshStep(index={self.index}, {self.mesh!r})"


def iter_region_meshes(regions: Sequence[Region]) -> Iterator[MeshStep]:
    """
    Lazily build one mesh per region, in the order given.

    Each mesh is built only when the caller asks for the next item, so
    breaking out of the loop is all it takes to stop early.
    """
    for index, region in enumerate(regions):
        yield MeshStep(index, region, build_region_mesh(region))


class MeshBuildSchedule:
    """
    Explicit stepper over a detected region list.

    Each call to step() builds exactly one region. cancel() stops the
    schedule; meshes already built stay valid and available in built.
    """

    def __init__(self, regions: Sequence[Region]):
        self._regions = list(regions)
        self._next = 0
        self._cancelled = False
        self.built: List[Mesh] = []

    @property
    def total(self) -> int:
        return len(self._regions)

    @property
    def remaining(self) -> int:
        if self._cancelled:
            return 0
        return len(self._regions) - self._next

    @property
    def is_done(self) -> bool:
        return self.remaining == 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def step(self) -> Optional[MeshStep]:
        """
        Build the next region's mesh.

        Returns:
            The MeshStep just built, or None if nothing is left to build
        """
        if self.is_done:
            return None

        index = self._next
        region = self._regions[index]
        mesh = build_region_mesh(region)

        self._next += 1
        self.built.append(mesh)
        return MeshStep(index, region, mesh)

    def cancel(self) -> None:
        """
        Stop building. Remaining regions are skipped, built meshes are kept.

        Cancelling a finished schedule does nothing.
        """
        if self.is_done:
            return
        logger.debug(f"Schedule cancelled with {self.remaining} regions left")
        self._cancelled = True

    def __iter__(self) -> Iterator[MeshStep]:
        while True:
            result = self.step()
            if result is None:
                return
            yield result


def run_paced(
    schedule: MeshBuildSchedule,
    delay_s: float,
    on_step: Optional[Callable[[MeshStep], None]] = None,
    sleep: Callable[[float], None] = time.sleep
) -> List[Mesh]:
    """
    Drive a schedule to completion with a pause between steps.

    The pause goes between two steps only: never before the first build
    and never after the last. on_step may call schedule.cancel() to stop
    early.

    Args:
        schedule: The schedule to drive
        delay_s: Pause between steps in seconds (0 = back to back)
        on_step: Optional callback invoked after each built region
        sleep: Sleep function (swap in a fake for tests)

    Returns:
        The meshes built, in region order
    """
    for result in schedule:
        if on_step is not None:
            on_step(result)
        if delay_s > 0 and not schedule.is_done:
            sleep(delay_s)

    return schedule.built
