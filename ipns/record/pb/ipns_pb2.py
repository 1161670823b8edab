# -*- coding: utf-8 -*-
# Protocol buffer module for ipns/record/pb/ipns.proto.
# The file descriptor is assembled from descriptor_pb2 rather than embedded
# as serialized bytes; the resulting classes are identical.
from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_sym_db = _symbol_database.Default()

_FIELD = _descriptor_pb2.FieldDescriptorProto

_file = _descriptor_pb2.FileDescriptorProto(
    name="ipns/record/pb/ipns.proto",
    package="ipns.record.pb",
    syntax="proto2",
)

_entry = _file.message_type.add(name="IpnsEntry")
_entry.enum_type.add(name="ValidityType").value.add(name="EOL", number=0)

for _number, _name, _type in (
    (1, "value", _FIELD.TYPE_BYTES),
    (2, "signatureV1", _FIELD.TYPE_BYTES),
    (3, "validityType", _FIELD.TYPE_ENUM),
    (4, "validity", _FIELD.TYPE_BYTES),
    (5, "sequence", _FIELD.TYPE_UINT64),
    (6, "ttl", _FIELD.TYPE_UINT64),
    (7, "pubKey", _FIELD.TYPE_BYTES),
    (8, "signatureV2", _FIELD.TYPE_BYTES),
    (9, "data", _FIELD.TYPE_BYTES),
):
    _field = _entry.field.add(
        name=_name, number=_number, label=_FIELD.LABEL_OPTIONAL, type=_type
    )
    if _type == _FIELD.TYPE_ENUM:
        _field.type_name = ".ipns.record.pb.IpnsEntry.ValidityType"

DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_file.SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(
    DESCRIPTOR, "ipns.record.pb.ipns_pb2", _globals
)
