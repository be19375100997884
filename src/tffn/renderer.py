"""Step renderer — turns compiled steps into output text."""

from tffn._internal.buffer import Buffer
from tffn.steps import Invoke, Literal, Steps


def render_steps(steps: Steps, out: Buffer) -> None:
    """Append the output of *steps* to *out*, in order.

    Literal text is copied as-is. Each ``Invoke`` calls its action with
    *out* exactly once; actions see everything rendered before them.
    """
    for step in steps:
        match step:
            case Literal(text=text):
                out.append(text)
            case Invoke(action=action):
                action(out)
            case _:
                msg = f"Unknown step type: {type(step).__name__}"
                raise TypeError(msg)


def render_to_string(steps: Steps, capacity: int = 64) -> str:
    """Render *steps* into a fresh buffer and return the text."""
    out = Buffer(capacity)
    render_steps(steps, out)
    return out.to_string()
