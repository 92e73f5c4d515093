from io import TextIOBase
from typing import Iterable, Optional, Set

from . import ClassEntry, MemberEntry

class _ClassScope:
    """Members already written for the class that's currently open"""
    __slots__ = "seen_names"
    seen_names: Set[str]
    def __init__(self):
        self.seen_names = set()

    @property
    def has_members(self) -> bool:
        return len(self.seen_names) > 0

class JsonMappingsEncoder:
    """
    Writes class mappings as JSON object entries, one class at a time.

    Only the comma separated entries are written, the caller is responsible for the enclosing braces.
    Everything is written directly to the output as it's visited, so nothing gets buffered.
    An encoder is only good for a single pass over the classes.
    """
    __slots__ = "output", "wrote_class", "_scope"
    output: TextIOBase
    wrote_class: bool
    _scope: Optional[_ClassScope]
    def __init__(self, output: TextIOBase):
        self.output = output
        self.wrote_class = False
        self._scope = None

    def on_class_enter(self, entry: ClassEntry):
        assert self._scope is None, "Previous class was never closed"
        output = self.output
        if self.wrote_class:
            output.write(",\n")
        output.write('  "')
        output.write(entry.original_name)
        output.write('": {\n')
        output.write('    "name": "')
        output.write(entry.resolved_name)
        output.write('",\n')
        # NOTE: The newline is deferred until the first member, so empty classes get '{}'
        output.write('    "members": {')
        self._scope = _ClassScope()
        self.wrote_class = True

    def on_member(self, member: MemberEntry):
        scope = self._scope
        assert scope is not None, "No open class"
        name = member.original_name
        if name in scope.seen_names:
            return  # Overload of a member we've already written, first one wins
        output = self.output
        output.write(",\n" if scope.has_members else "\n")
        output.write('      "')
        output.write(name)
        output.write('": "')
        output.write(member.resolved_name)
        output.write('"')
        scope.seen_names.add(name)

    def on_class_exit(self):
        scope = self._scope
        assert scope is not None, "No open class"
        output = self.output
        if scope.has_members:
            output.write("\n    }")
        else:
            output.write("}")
        output.write("\n  }")
        self._scope = None

def encode_class_entries(output: TextIOBase, entries: Iterable[ClassEntry]) -> int:
    """
    Write every class entry to the output, visiting fields before methods.

    Returns the number of classes written.
    """
    encoder = JsonMappingsEncoder(output)
    count = 0
    for entry in entries:
        encoder.on_class_enter(entry)
        for field in entry.fields:
            encoder.on_member(field)
        for method in entry.methods:
            encoder.on_member(method)
        encoder.on_class_exit()
        count += 1
    return count
