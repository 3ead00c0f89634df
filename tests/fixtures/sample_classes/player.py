"""Sample module with a class marked for method export.

Only read as text by the tests; the runtime module is never imported.
"""

from typing import Annotated

from gdnative import Node, export, methods, mut, opt, unsafe

GRAVITY = 9.8


@methods
class Player:
    """A player character."""

    speed = 10

    def helper(self):
        return self.speed

    @export
    def jump(self, owner: Node, height: float) -> None:
        pass

    @export(rpc="remote")
    def shoot(self, owner: Node, target: str, power: Annotated[int, opt] = 1) -> bool:
        return True

    @export
    def broken(self):
        pass

    @export(rpc="master_sync")
    @unsafe
    def teleport(self, owner: Node, _: int, x: Annotated[float, mut]) -> None:
        pass


class Plain:
    def untouched(self):
        pass
