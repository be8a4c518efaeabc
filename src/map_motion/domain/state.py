# map_motion/domain/state.py
from dataclasses import dataclass, field

from map_motion.domain.entities.motion import Actor
from map_motion.domain.mechanics.mechanics_path_traversers import PathMover


@dataclass
class Assignment:
    """An actor's live path movement and the units its speed is expressed in."""

    mover: PathMover
    speed: float
    meters_per_unit: float


@dataclass
class FleetState:
    actors: dict[int | str, Actor] = field(default_factory=dict)
    assignments: dict[int | str, Assignment] = field(default_factory=dict)

    def add_actor(self, a: Actor) -> None:
        self.actors[a.id] = a

    def actor(self, actor_id) -> Actor:
        try:
            return self.actors[actor_id]
        except KeyError:
            raise KeyError(f"unknown actor {actor_id!r}") from None

    def release(self, actor_id) -> None:
        asg = self.assignments.pop(actor_id, None)
        if asg is not None:
            asg.mover.reset()
