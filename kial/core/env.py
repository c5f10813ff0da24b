"""Lexically scoped binding environment.

Scope frames live in an arena (Scopes) and refer to their parent by index rather than by reference. An Environment
is a handle on one frame: lookups walk the parent indices toward the root, and writes only ever touch the frame the
handle points to. Frames are created and released in stack order, so a child frame never outlives its parent.
"""

from contextlib import contextmanager

from kial.lang.error import EvalError


class Scopes:
    """Arena of scope frames. Frame i is bindings[i], and its parent is parents[i] (None for a root)."""

    def __init__(self):
        self.bindings = []
        self.parents = []

    def new_frame(self, parent=None):
        if parent is not None and not 0 <= parent < len(self.bindings):
            raise ValueError(f"parent frame {parent} does not exist")
        self.bindings.append({})
        self.parents.append(parent)
        return len(self.bindings) - 1

    def release(self, frame):
        """Drops frame, which must be the most recently created one that is still alive."""
        if frame != len(self.bindings) - 1:
            raise ValueError(f"frame {frame} released out of order")
        self.bindings.pop()
        self.parents.pop()

    def chain(self, frame):
        """Yields frame and then each of its ancestors, innermost first."""
        while frame is not None:
            yield frame
            frame = self.parents[frame]

    def __len__(self):
        return len(self.bindings)


class Environment:
    """Handle on a single scope frame. Environment() creates a fresh arena with an empty root frame."""

    def __init__(self, scopes=None, frame=None):
        if scopes is None:
            scopes = Scopes()
        if frame is None:
            frame = scopes.new_frame()

        self.scopes = scopes
        self.frame = frame

    @property
    def bindings(self):
        """The name: value mapping of this frame only."""
        return self.scopes.bindings[self.frame]

    @property
    def parent(self):
        parent = self.scopes.parents[self.frame]
        return Environment(self.scopes, parent) if parent is not None else None

    def store_binding(self, name, value):
        """Binds name in this frame, silently replacing any binding of name in this same frame."""
        self.bindings[name] = value

    def find_binding(self, name):
        """Returns the innermost value bound to name, or None if no frame in the chain binds it."""
        for frame in self.scopes.chain(self.frame):
            if name in self.scopes.bindings[frame]:
                return self.scopes.bindings[frame][name]
        return None

    def has_binding(self, name):
        return any(name in self.scopes.bindings[frame] for frame in self.scopes.chain(self.frame))

    def get_binding(self, name):
        value = self.find_binding(name)
        if value is None:
            raise EvalError("binding does not exist: {}", name)
        return value

    def create_child(self):
        return Environment(self.scopes, self.scopes.new_frame(self.frame))

    def release(self):
        self.scopes.release(self.frame)

    @contextmanager
    def child(self):
        """Child frame that is released when the with block exits, however it exits."""
        child = self.create_child()
        try:
            yield child
        finally:
            child.release()

    def __repr__(self):
        content = ", ".join(f"{name}={value}" for name, value in self.bindings.items())
        parent = self.parent
        return f"[{content}]" + (f" < {parent!r}" if parent is not None else "")
