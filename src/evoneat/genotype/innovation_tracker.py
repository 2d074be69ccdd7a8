"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Ledger of innovation numbers assigned to connections
"""

from itertools import count
from typing    import NamedTuple

from evoneat.errors import CorruptSnapshot

class InnovationEntry(NamedTuple):
    node_in   : int
    node_out  : int
    innovation: int

class InnovationTracker:
    """
    Tracks structural changes across all genomes of a population.
    Ensures the same structural change (a connection between the same two
    node IDs) gets the same innovation number, whichever genome makes it and
    in whichever generation.

    The ledger itself is append-only and belongs to the tracker instance.
    The counter that hands out new innovation numbers is shared by every
    tracker of the process, so innovation numbers are strictly increasing
    for the whole life of the process. It is only used from single-threaded
    phases of the evolution loop, so no locking is done.

    Public Attributes:
        entries: Every (node_in, node_out, innovation) assignment, in creation order

    Public Methods:
        get_innovation_number(node_in, node_out): Look up or allocate an innovation number
    """

    # Process-wide counter, innovation numbers start at 1
    _next_innovation_number = count(1)
    _last_innovation_number = 0

    def __init__(self):
        self.entries: list[InnovationEntry] = []

        # (node_in, node_out) => innovation number, for fast lookup
        self._innovation_numbers: dict[tuple[int, int], int] = {}

    @classmethod
    def _allocate(cls) -> int:
        innovation = next(cls._next_innovation_number)
        cls._last_innovation_number = innovation
        return innovation

    @classmethod
    def advance_past(cls, innovation: int) -> None:
        """Make sure numbers handed out from now on are greater than 'innovation'."""
        if innovation > cls._last_innovation_number:
            cls._next_innovation_number = count(innovation + 1)
            cls._last_innovation_number = innovation

    def get_innovation_number(self, node_in: int, node_out: int) -> int:
        """
        Get innovation number for a connection, identified by its endpoints.
        Returns existing innovation number if this connection was created
        before, otherwise assigns a new innovation number.

        Parameters:
            node_in:  node ID for the 'from' end of the connection
            node_out: node ID for the 'to'   end of the connection

        Returns:
            connection ID (a.k.a. innovation number)
        """
        key = (node_in, node_out)

        # This is a new connection
        if key not in self._innovation_numbers:
            innovation = self._allocate()
            self._innovation_numbers[key] = innovation
            self.entries.append(InnovationEntry(node_in, node_out, innovation))

        return self._innovation_numbers[key]

    def __len__(self):
        return len(self.entries)

    def to_dict(self) -> list[dict]:
        return [{"from": e.node_in, "to": e.node_out, "innovation": e.innovation} for e in self.entries]

    @classmethod
    def from_dict(cls, entries: list[dict]) -> 'InnovationTracker':
        """
        Rebuild a ledger from its JSON description.
        The process-wide counter is moved past every restored number.

        Raises:
            CorruptSnapshot: if an entry is missing a field
        """
        tracker = cls()
        try:
            for entry in entries:
                e = InnovationEntry(int(entry["from"]), int(entry["to"]), int(entry["innovation"]))
                tracker.entries.append(e)
                tracker._innovation_numbers[(e.node_in, e.node_out)] = e.innovation
                cls.advance_past(e.innovation)
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptSnapshot(f"Bad innovation ledger entry: {e}") from e
        return tracker
