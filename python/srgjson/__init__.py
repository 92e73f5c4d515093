from typing import Dict, List, Iterator, NamedTuple, Optional, Tuple, Union
from sys import intern
import os

BINARY_HEADER = b"SuperSrg binary mappings\0"

class JavaClass:
    __slots__ = "internal_name"
    def __init__(self, internal_name):
        if not internal_name or "." in internal_name:
            raise ValueError(f"Invalid internal class name: {repr(internal_name)}")
        self.internal_name = intern(internal_name)

    def __hash__(self):
        return hash(self.internal_name)

    def __eq__(self, other):
        if isinstance(other, JavaClass):
            return self.internal_name == other.internal_name
        else:
            return NotImplemented

    def __repr__(self):
        return f"JavaClass({repr(self.internal_name)})"

    @property
    def external_name(self) -> str:
        return self.internal_name.replace("/", ".")

class FieldData:
    __slots__ = "declaring_class", "name"
    declaring_class: JavaClass
    name: str
    def __init__(self, declaring_class, name):
        assert type(declaring_class) is JavaClass, f"Unexpected class: {repr(declaring_class)}"
        self.declaring_class = declaring_class
        self.name = intern(name)

    def __eq__(self, other):
        if isinstance(other, FieldData):
            return other.declaring_class.internal_name == self.declaring_class.internal_name and self.name == other.name
        else:
            return NotImplemented

    def __hash__(self):
        return hash((self.declaring_class.internal_name, self.name))

    def __repr__(self):
        return f"FieldData({repr(self.declaring_class)}, {repr(self.name)})"
class MethodData:
    __slots__ = "declaring_class", "name", "descriptor"
    declaring_class: JavaClass
    name: str
    descriptor: str
    def __init__(self, declaring_class, name, descriptor):
        assert type(declaring_class) is JavaClass, f"Unexpected class: {repr(declaring_class)}"
        if not descriptor.startswith("(") or ")" not in descriptor:
            raise ValueError(f"Invalid method descriptor: {descriptor}")
        self.declaring_class = declaring_class
        self.name = intern(name)
        self.descriptor = intern(descriptor) # NOTE: Overloads share names, so intern descriptors too

    def __eq__(self, other):
        if isinstance(other, MethodData):
            return self.declaring_class.internal_name == other.declaring_class.internal_name \
                and self.name == other.name \
                and self.descriptor == other.descriptor
        else:
            return NotImplemented

    def __hash__(self):
        return hash((self.declaring_class.internal_name, self.name, self.descriptor))

    def __repr__(self):
        return f"MethodData({repr(self.declaring_class)}, {repr(self.name)}, {repr(self.descriptor)})"
class MemberEntry(NamedTuple):
    """A field or method of the class currently being written, with its rename (if any)"""
    original_name: str
    new_name: Optional[str] = None

    @property
    def resolved_name(self) -> str:
        if self.new_name is None:
            return self.original_name
        return self.new_name

class ClassEntry(NamedTuple):
    """
    Snapshot of a single class and its members, ready to be written.

    Names are external (dot-separated). A missing ``new_name`` means the class keeps its name.
    """
    original_name: str
    new_name: Optional[str] = None
    fields: Tuple[MemberEntry, ...] = ()
    methods: Tuple[MemberEntry, ...] = ()

    @property
    def resolved_name(self) -> str:
        if self.new_name is None:
            return self.original_name
        return self.new_name

class MappingsBuilder:
    __slots__ = "classes", "class_names", "field_names", "method_names", "_members"
    classes: List[JavaClass]
    class_names: Dict[JavaClass, JavaClass]
    field_names: Dict[FieldData, str]
    method_names: Dict[MethodData, str]
    def __init__(self):
        self.classes = []
        self.class_names = {}
        self.field_names = {}
        self.method_names = {}
        # Per class members in declaration order (dicts used as ordered sets)
        self._members: Dict[JavaClass, Tuple[Dict[FieldData, None], Dict[MethodData, None]]] = {}

    def add_class(self, original: JavaClass, revised: Optional[JavaClass] = None):
        if original not in self._members:
            self.classes.append(original)
            self._members[original] = ({}, {})
        if revised is not None:
            self.class_names[original] = revised

    def add_field(self, original: FieldData, revised_name: Optional[str] = None):
        self.add_class(original.declaring_class)
        fields, _ = self._members[original.declaring_class]
        fields.setdefault(original)
        if revised_name is not None:
            self.field_names[original] = intern(revised_name)

    def add_method(self, original: MethodData, revised_name: Optional[str] = None):
        self.add_class(original.declaring_class)
        _, methods = self._members[original.declaring_class]
        methods.setdefault(original)
        if revised_name is not None:
            self.method_names[original] = intern(revised_name)

    @property
    def num_fields(self) -> int:
        return sum(len(fields) for fields, _ in self._members.values())

    @property
    def num_methods(self) -> int:
        return sum(len(methods) for _, methods in self._members.values())

    def build(self) -> "Mappings":
        members = {
            declaring_class: (tuple(fields), tuple(methods))
            for declaring_class, (fields, methods) in self._members.items()
        }
        return Mappings(
            tuple(self.classes),
            dict(self.class_names),
            dict(self.field_names),
            dict(self.method_names),
            members
        )

class Mappings:
    """
    A finished renaming table.

    Classes and members keep the order they were first seen in,
    which is the order they get written out in.
    """
    __slots__ = "classes", "class_names", "field_names", "method_names", "members"
    classes: Tuple[JavaClass, ...]
    class_names: Dict[JavaClass, JavaClass]
    field_names: Dict[FieldData, str]
    method_names: Dict[MethodData, str]
    members: Dict[JavaClass, Tuple[Tuple[FieldData, ...], Tuple[MethodData, ...]]]
    def __init__(self, classes, class_names, field_names, method_names, members):
        self.classes = classes
        self.class_names = class_names
        self.field_names = field_names
        self.method_names = method_names
        self.members = members

    def __len__(self):
        return len(self.classes)

    def resolve_class_name(self, key: JavaClass) -> Optional[str]:
        """Return the new external name of the class, or None if it keeps its name"""
        revised = self.class_names.get(key)
        if revised is None or revised == key:
            return None
        return revised.external_name

    def resolve_member_name(self, key: Union[FieldData, MethodData]) -> Optional[str]:
        """Return the new name of the field or method, or None if it keeps its name"""
        if isinstance(key, FieldData):
            revised = self.field_names.get(key)
        elif isinstance(key, MethodData):
            revised = self.method_names.get(key)
        else:
            raise TypeError(f"Unexpected key type: {repr(key)}")
        if revised is None or revised == key.name:
            return None
        return revised

    def class_entries(self) -> Iterator[ClassEntry]:
        for java_class in self.classes:
            fields, methods = self.members.get(java_class, ((), ()))
            yield ClassEntry(
                java_class.external_name,
                self.resolve_class_name(java_class),
                tuple(MemberEntry(field.name, self.resolve_member_name(field)) for field in fields),
                tuple(MemberEntry(method.name, self.resolve_member_name(method)) for method in methods)
            )

def load_mappings(path: Union[str, os.PathLike]) -> Mappings:
    """Load mappings from either a SuperSrg binary file or an SRG text file, based on its header"""
    # NOTE: Imported here, since both decoders import the model from this module
    from .binary import BinaryMappingsDecoder
    from .srg import SrgMappingsDecoder, SrgMappingsError
    with open(path, 'rb') as f:
        data = f.read()
    if data.startswith(BINARY_HEADER):
        builder = BinaryMappingsDecoder(data).decode()
    else:
        try:
            text = data.decode('utf-8-sig')  # Tolerate a leading BOM
        except UnicodeError as e:
            raise SrgMappingsError(f"Mappings are neither binary nor UTF-8 text: {path}") from e
        builder = SrgMappingsDecoder(text.splitlines()).decode()
    return builder.build()
