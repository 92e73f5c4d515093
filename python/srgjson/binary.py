import logging

from lz4.block import decompress as lz4_decompress, LZ4BlockError

from . import MappingsBuilder, MethodData, FieldData, JavaClass

logger = logging.getLogger(__name__)

class BinaryMappingsError(Exception):
    pass

class BinaryMappingsDecoder:
    """SuperSrg binary mappings decoder"""
    __slots__ = "data", "data_view", "index"
    def __init__(self, data):
        # NOTE: We are forced to read everything into memory by the lz4 implementation
        assert isinstance(data, (bytes, bytearray)), f"Unexpected data: {repr(data)}"
        self.data = data
        # NOTE: Taking a memoryview allows O(1) slicing, which would otherwise imply a copy
        # However, we still need to keep the underlying bytes object for utilities like 'index'
        self.data_view = memoryview(data)
        self.index = 0

    def read_uint(self, amount):
        old_index = self.index
        end_index = old_index + amount
        # Slicing past the end silently truncates, so check the length ourselves
        if end_index > len(self.data_view):
            raise BinaryMappingsError("Insufficent data!")
        result = int.from_bytes(self.data_view[old_index:end_index], 'big')
        self.index = end_index
        return result

    def read_string(self):
        length = self.read_uint(2)
        index = self.index
        end_index = index + length
        if end_index > len(self.data_view):
            raise BinaryMappingsError(f"Insufficent data to read {length} byte string")
        try:
            result = str(self.data_view[index:end_index], 'utf-8')
        except UnicodeError as e:
            raise BinaryMappingsError(f"Invalid {length} byte string!") from e
        self.index = end_index
        return result

    def read_u32(self):
        return self.read_uint(4)

    def read_u64(self):
        return self.read_uint(8)

    def read_nullterm(self):
        try:
            start = self.index
            end = self.data.index(b'\0', start)
            result = str(self.data_view[start:end], 'utf-8')
            self.index = end + 1  # Jump one past the null terminator
            return result
        except (ValueError, UnicodeError) as e:
            raise BinaryMappingsError("Unable to read null terminated string!") from e

    def decode(self) -> MappingsBuilder:
        try:
            header = self.read_nullterm()
        except BinaryMappingsError as e:
            raise BinaryMappingsError("Invalid header!") from e.__cause__
        if header != "SuperSrg binary mappings":
            raise BinaryMappingsError(f"Unexpected header: {header}")
        version = self.read_u32()
        if version != 1:
            raise BinaryMappingsError(f"Unexpected version: {version}")
        compression = self.read_string()
        if compression == "":
            # Continue to treat uncompressed data as-is
            pass
        elif compression == "lz4-block":
            try:
                decompressed = lz4_decompress(self.data_view[self.index:])
            except (LZ4BlockError, ValueError) as e:
                raise BinaryMappingsError("Invalid lz4-block data!") from e
            self.data = decompressed
            self.data_view = memoryview(decompressed)
            self.index = 0
        elif compression in ("lzma2", "gzip"):
            raise BinaryMappingsError(f"Unsupported compression: {compression}")
        else:
            raise BinaryMappingsError(f"Forbidden compression: {compression}")
        builder = MappingsBuilder()
        num_classes = self.read_u64()
        num_members = 0
        try:
            for _ in range(num_classes):
                original_class = JavaClass(self.read_string())
                revised_class_name = self.read_string()
                revised_class = JavaClass(revised_class_name) if revised_class_name else None
                builder.add_class(original_class, revised_class)
                num_methods = self.read_u32()
                for _ in range(num_methods):
                    original_name = self.read_string()
                    revised_name = self.read_string()
                    original_descriptor = self.read_string()
                    self.read_string()  # Ignore the revised signature
                    original_data = MethodData(original_class, original_name, original_descriptor)
                    builder.add_method(original_data, revised_name or None)
                num_fields = self.read_u32()
                for _ in range(num_fields):
                    original_name = self.read_string()
                    revised_name = self.read_string()
                    original_data = FieldData(original_class, original_name)
                    builder.add_field(original_data, revised_name or None)
                num_members += num_methods + num_fields
        except ValueError as e:
            raise BinaryMappingsError(f"Invalid mappings: {e}") from e
        if self.index != len(self.data_view):
            raise BinaryMappingsError(f"Unexpected trailing {len(self.data_view) - self.index} bytes")
        logger.debug("Decoded %d classes with %d members (compression=%r)", num_classes, num_members, compression)
        return builder
