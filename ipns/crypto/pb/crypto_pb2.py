# -*- coding: utf-8 -*-
# Protocol buffer module for ipns/crypto/pb/crypto.proto.
# The file descriptor is assembled from descriptor_pb2 rather than embedded
# as serialized bytes; the resulting classes are identical.
from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_sym_db = _symbol_database.Default()

_FIELD = _descriptor_pb2.FieldDescriptorProto

_file = _descriptor_pb2.FileDescriptorProto(
    name="ipns/crypto/pb/crypto.proto",
    package="ipns.crypto.pb",
    syntax="proto2",
)

_key_type = _file.enum_type.add(name="KeyType")
for _number, _name in enumerate(("RSA", "Ed25519", "Secp256k1", "ECDSA")):
    _key_type.value.add(name=_name, number=_number)

for _message_name in ("PublicKey", "PrivateKey"):
    _message_type = _file.message_type.add(name=_message_name)
    _message_type.field.add(
        name="key_type",
        number=1,
        label=_FIELD.LABEL_REQUIRED,
        type=_FIELD.TYPE_ENUM,
        type_name=".ipns.crypto.pb.KeyType",
    )
    _message_type.field.add(
        name="data",
        number=2,
        label=_FIELD.LABEL_REQUIRED,
        type=_FIELD.TYPE_BYTES,
    )

DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_file.SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(
    DESCRIPTOR, "ipns.crypto.pb.crypto_pb2", _globals
)
