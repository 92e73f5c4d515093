import logging
from typing import Iterable, Tuple

from . import MappingsBuilder, JavaClass, FieldData, MethodData

logger = logging.getLogger(__name__)

class SrgMappingsError(ValueError):
    pass

_EXPECTED_PARTS = {"PK:": 2, "CL:": 2, "FD:": 2, "MD:": 4}

def _split_member(text: str) -> Tuple[JavaClass, str]:
    owner, sep, name = text.rpartition('/')
    if not sep or not owner or not name:
        raise ValueError(f"Expected a class-qualified member: {text}")
    return JavaClass(owner), name

class SrgMappingsDecoder:
    """Decodes the line based SRG mappings format"""
    __slots__ = "lines"
    def __init__(self, lines: Iterable[str]):
        self.lines = lines

    def decode(self) -> MappingsBuilder:
        builder = MappingsBuilder()
        num_packages = 0
        for line_number, line in enumerate(self.lines, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            kind, _, rest = line.partition(' ')
            parts = rest.split()
            expected_parts = _EXPECTED_PARTS.get(kind)
            if expected_parts != len(parts):
                raise SrgMappingsError(f"Invalid line {line_number}: {line}")
            try:
                if kind == "PK:":
                    num_packages += 1  # Packages have no JSON counterpart
                elif kind == "CL:":
                    builder.add_class(JavaClass(parts[0]), JavaClass(parts[1]))
                elif kind == "FD:":
                    declaring_class, name = _split_member(parts[0])
                    _, revised_name = _split_member(parts[1])
                    builder.add_field(FieldData(declaring_class, name), revised_name)
                else:
                    declaring_class, name = _split_member(parts[0])
                    _, revised_name = _split_member(parts[2])
                    builder.add_method(MethodData(declaring_class, name, parts[1]), revised_name)
            except ValueError as e:
                raise SrgMappingsError(f"Invalid line {line_number}: {e}") from e
        if num_packages:
            logger.debug("Ignored %d package mappings", num_packages)
        logger.debug(
            "Decoded %d classes, %d fields and %d methods",
            len(builder.classes), builder.num_fields, builder.num_methods
        )
        return builder
