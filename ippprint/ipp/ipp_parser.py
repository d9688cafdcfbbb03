from typing import Dict, List, Any, Optional, Tuple
from enum import IntEnum
import logging
import struct
import io

from ippprint.core.errors import DecodeError

logger = logging.getLogger(__name__)

# Enumeración de etiquetas IPP (delimitadores y tipos de valor)
class IPPTag(IntEnum):
    # Delimitadores de grupos
    OPERATION_ATTRIBUTES_TAG = 0x01
    JOB_ATTRIBUTES_TAG = 0x02
    END_OF_ATTRIBUTES_TAG = 0x03
    PRINTER_ATTRIBUTES_TAG = 0x04
    UNSUPPORTED_ATTRIBUTES_TAG = 0x05

    # Valores fuera de banda
    UNSUPPORTED = 0x10
    DEFAULT = 0x11
    UNKNOWN = 0x12
    NO_VALUE = 0x13
    NOT_SETTABLE = 0x15
    DELETE_ATTRIBUTE = 0x16
    ADMIN_DEFINE = 0x17

    # Enteros
    INTEGER = 0x21
    BOOLEAN = 0x22
    ENUM = 0x23

    # Cadenas binarias y especiales
    OCTET_STRING = 0x30
    DATETIME = 0x31
    RESOLUTION = 0x32
    RANGE_OF_INTEGER = 0x33
    BEGIN_COLLECTION = 0x34
    TEXT_WITH_LANGUAGE = 0x35
    NAME_WITH_LANGUAGE = 0x36
    END_COLLECTION = 0x37

    # Cadenas de caracteres
    TEXT_WITHOUT_LANGUAGE = 0x41
    NAME_WITHOUT_LANGUAGE = 0x42
    KEYWORD = 0x44
    URI = 0x45
    URI_SCHEME = 0x46
    CHARSET = 0x47
    NATURAL_LANGUAGE = 0x48
    MIME_MEDIA_TYPE = 0x49
    MEMBER_ATTR_NAME = 0x4a

    EXTENSION = 0x7f

    @classmethod
    def _missing_(cls, value):
        logger.warning(f"Etiqueta IPP desconocida: {value}")
        return cls.UNKNOWN

    @property
    def is_out_of_band(self) -> bool:
        return 0x10 <= self.value <= 0x1f

# Enumeración de operaciones IPP usadas por el cliente
class IPPOperation(IntEnum):
    PRINT_JOB = 0x0002
    GET_PRINTER_ATTRIBUTES = 0x000b

# Enumeración de códigos de estado IPP
class IPPStatusCode(IntEnum):
    # Éxito
    SUCCESSFUL_OK = 0x0000
    SUCCESSFUL_OK_IGNORED_OR_SUBSTITUTED_ATTRIBUTES = 0x0001
    SUCCESSFUL_OK_CONFLICTING_ATTRIBUTES = 0x0002

    # Errores del cliente
    CLIENT_ERROR_BAD_REQUEST = 0x0400
    CLIENT_ERROR_FORBIDDEN = 0x0401
    CLIENT_ERROR_NOT_AUTHENTICATED = 0x0402
    CLIENT_ERROR_NOT_AUTHORIZED = 0x0403
    CLIENT_ERROR_NOT_POSSIBLE = 0x0404
    CLIENT_ERROR_TIMEOUT = 0x0405
    CLIENT_ERROR_NOT_FOUND = 0x0406
    CLIENT_ERROR_GONE = 0x0407
    CLIENT_ERROR_REQUEST_ENTITY_TOO_LARGE = 0x0408
    CLIENT_ERROR_REQUEST_VALUE_TOO_LONG = 0x0409
    CLIENT_ERROR_DOCUMENT_FORMAT_NOT_SUPPORTED = 0x040a
    CLIENT_ERROR_ATTRIBUTES_OR_VALUES_NOT_SUPPORTED = 0x040b
    CLIENT_ERROR_URI_SCHEME_NOT_SUPPORTED = 0x040c
    CLIENT_ERROR_CHARSET_NOT_SUPPORTED = 0x040d
    CLIENT_ERROR_CONFLICTING_ATTRIBUTES = 0x040e
    CLIENT_ERROR_COMPRESSION_NOT_SUPPORTED = 0x040f
    CLIENT_ERROR_COMPRESSION_ERROR = 0x0410
    CLIENT_ERROR_DOCUMENT_FORMAT_ERROR = 0x0411
    CLIENT_ERROR_DOCUMENT_ACCESS_ERROR = 0x0412

    # Errores del servidor
    SERVER_ERROR_INTERNAL_ERROR = 0x0500
    SERVER_ERROR_OPERATION_NOT_SUPPORTED = 0x0501
    SERVER_ERROR_SERVICE_UNAVAILABLE = 0x0502
    SERVER_ERROR_VERSION_NOT_SUPPORTED = 0x0503
    SERVER_ERROR_DEVICE_ERROR = 0x0504
    SERVER_ERROR_TEMPORARY_ERROR = 0x0505
    SERVER_ERROR_NOT_ACCEPTING_JOBS = 0x0506
    SERVER_ERROR_BUSY = 0x0507
    SERVER_ERROR_JOB_CANCELED = 0x0508
    SERVER_ERROR_MULTIPLE_DOCUMENT_JOBS_NOT_SUPPORTED = 0x0509

    # Palabra clave IPP, p. ej. "client-error-not-found"
    @property
    def keyword(self) -> str:
        return self.name.lower().replace("_", "-")

# Palabra clave para cualquier código, incluidos los que no están en la enumeración
def status_keyword(code: int) -> str:
    try:
        return IPPStatusCode(code).keyword
    except ValueError:
        return f"unknown-status-0x{code:04x}"

_STRING_TAGS = (
    IPPTag.TEXT_WITHOUT_LANGUAGE,
    IPPTag.NAME_WITHOUT_LANGUAGE,
    IPPTag.KEYWORD,
    IPPTag.URI,
    IPPTag.URI_SCHEME,
    IPPTag.CHARSET,
    IPPTag.NATURAL_LANGUAGE,
    IPPTag.MIME_MEDIA_TYPE,
    IPPTag.MEMBER_ATTR_NAME,
)

# Representa un atributo IPP con nombre, etiqueta y uno o más valores
class IPPAttribute:

    def __init__(self, name: str, tag: IPPTag, values: Any):
        self.name = name
        self.tag = tag
        if isinstance(values, list):
            self.values: List[Any] = list(values)
        elif isinstance(values, tuple) and not _is_scalar_tuple(tag):
            self.values = list(values)
        else:
            self.values = [values]

    @property
    def value(self) -> Any:
        return self.values[0] if self.values else None

    def __repr__(self):
        return f"IPPAttribute(name='{self.name}', tag={self.tag.name}, values={self.values})"

# Rangos, resoluciones y textos con idioma se expresan como tuplas de un solo valor
def _is_scalar_tuple(tag: IPPTag) -> bool:
    return tag in (
        IPPTag.RANGE_OF_INTEGER,
        IPPTag.RESOLUTION,
        IPPTag.TEXT_WITH_LANGUAGE,
        IPPTag.NAME_WITH_LANGUAGE,
    )

# Estructura de mensaje IPP con encabezado, grupos de atributos y datos de documento
class IPPMessage:

    def __init__(self, version_major: int = 2, version_minor: int = 0):
        self.version_major: int = version_major
        self.version_minor: int = version_minor
        self.operation_id: int = 0
        self.request_id: int = 0
        self.operation_attributes: Dict[str, IPPAttribute] = {}
        self.job_attributes: Dict[str, IPPAttribute] = {}
        self.printer_attributes: Dict[str, IPPAttribute] = {}
        self.unsupported_attributes: Dict[str, IPPAttribute] = {}
        self.document_data: Optional[bytes] = None
        self.status_code: Optional[int] = None

    # Agrega un atributo al grupo de operación
    def add_operation_attribute(self, name: str, tag: IPPTag, value: Any):
        self.operation_attributes[name] = IPPAttribute(name, tag, value)

    # Agrega un atributo al grupo de impresora
    def add_printer_attribute(self, name: str, tag: IPPTag, value: Any):
        self.printer_attributes[name] = IPPAttribute(name, tag, value)

    # Agrega un atributo al grupo de trabajo
    def add_job_attribute(self, name: str, tag: IPPTag, value: Any):
        self.job_attributes[name] = IPPAttribute(name, tag, value)

    # Grupos en el orden en que se serializan
    def groups(self) -> List[Tuple[IPPTag, Dict[str, IPPAttribute]]]:
        return [
            (IPPTag.OPERATION_ATTRIBUTES_TAG, self.operation_attributes),
            (IPPTag.JOB_ATTRIBUTES_TAG, self.job_attributes),
            (IPPTag.PRINTER_ATTRIBUTES_TAG, self.printer_attributes),
            (IPPTag.UNSUPPORTED_ATTRIBUTES_TAG, self.unsupported_attributes),
        ]

    # Busca un atributo por nombre; sin grupos indicados recorre todos
    def find_attribute(self, name: str, *groups: Dict[str, IPPAttribute]) -> Optional[IPPAttribute]:
        for group in groups or [g for _, g in self.groups()]:
            if name in group:
                return group[name]
        return None

# Analizador IPP: construcción de solicitudes y parseo de respuestas
class IPPParser:

    # Serializa una solicitud (operation_id en el encabezado); no incluye el documento
    @staticmethod
    def build_request(message: IPPMessage) -> bytes:
        return IPPParser._encode(message, message.operation_id)

    # Serializa una respuesta (status_code en el encabezado)
    @staticmethod
    def build_response(message: IPPMessage) -> bytes:
        return IPPParser._encode(message, message.status_code or 0)

    # Parsea una solicitud IPP; lo que sigue al fin de atributos es el documento
    @staticmethod
    def parse_request(data: bytes) -> IPPMessage:
        message, code = IPPParser._decode(data)
        message.operation_id = code
        return message

    # Parsea una respuesta IPP y expone el código de estado
    @staticmethod
    def parse_response(data: bytes) -> IPPMessage:
        message, code = IPPParser._decode(data)
        message.status_code = code
        return message

    @staticmethod
    def _encode(message: IPPMessage, code: int) -> bytes:
        stream = io.BytesIO()

        # Encabezado: versión, operación/estado, request-id
        stream.write(
            struct.pack(
                ">BBHI",
                message.version_major,
                message.version_minor,
                code,
                message.request_id,
            )
        )

        for group_tag, attributes in message.groups():
            if not attributes and group_tag != IPPTag.OPERATION_ATTRIBUTES_TAG:
                continue
            stream.write(bytes([group_tag]))
            for attribute in attributes.values():
                IPPParser._write_attribute(stream, attribute)

        # Fin de atributos
        stream.write(bytes([IPPTag.END_OF_ATTRIBUTES_TAG]))

        return stream.getvalue()

    # Atributos multivalor: primer valor con nombre y el resto con nombre vacío
    @staticmethod
    def _write_attribute(stream: io.BytesIO, attribute: IPPAttribute):
        values = attribute.values
        if not values:
            if not attribute.tag.is_out_of_band:
                raise ValueError(f"El atributo {attribute.name} no tiene valores")
            values = [None]

        for index, value in enumerate(values):
            name = attribute.name if index == 0 else ""
            if attribute.tag == IPPTag.BEGIN_COLLECTION:
                IPPParser._write_collection(stream, name, value)
            else:
                IPPParser._write_value(stream, attribute.tag, name, IPPParser._encode_value(attribute.tag, value))

    @staticmethod
    def _write_collection(stream: io.BytesIO, name: str, members: Dict[str, IPPAttribute]):
        IPPParser._write_value(stream, IPPTag.BEGIN_COLLECTION, name, b"")
        for member_name, member in members.items():
            IPPParser._write_value(stream, IPPTag.MEMBER_ATTR_NAME, "", member_name.encode("utf-8"))
            for value in member.values:
                if member.tag == IPPTag.BEGIN_COLLECTION:
                    IPPParser._write_collection(stream, "", value)
                else:
                    IPPParser._write_value(stream, member.tag, "", IPPParser._encode_value(member.tag, value))
        IPPParser._write_value(stream, IPPTag.END_COLLECTION, "", b"")

    @staticmethod
    def _write_value(stream: io.BytesIO, tag: IPPTag, name: str, value_bytes: bytes):
        name_bytes = name.encode("utf-8")
        if len(name_bytes) > 0xffff or len(value_bytes) > 0xffff:
            raise ValueError(f"Atributo demasiado largo: {name}")

        # Escribir etiqueta, nombre y valor
        stream.write(bytes([tag]))
        stream.write(len(name_bytes).to_bytes(2, "big"))
        stream.write(name_bytes)
        stream.write(len(value_bytes).to_bytes(2, "big"))
        stream.write(value_bytes)

    # Serializa un valor según su etiqueta explícita
    @staticmethod
    def _encode_value(tag: IPPTag, value: Any) -> bytes:
        if tag.is_out_of_band:
            return b""
        if tag in (IPPTag.INTEGER, IPPTag.ENUM):
            return struct.pack(">i", int(value))
        if tag == IPPTag.BOOLEAN:
            return bytes([1 if value else 0])
        if tag == IPPTag.RANGE_OF_INTEGER:
            lower, upper = value
            return struct.pack(">ii", int(lower), int(upper))
        if tag == IPPTag.RESOLUTION:
            cross_feed, feed, units = value
            return struct.pack(">iiB", int(cross_feed), int(feed), int(units))
        if tag in (IPPTag.TEXT_WITH_LANGUAGE, IPPTag.NAME_WITH_LANGUAGE):
            language, text = value
            language_bytes = language.encode("utf-8")
            text_bytes = text.encode("utf-8")
            return (len(language_bytes).to_bytes(2, "big") + language_bytes +
                    len(text_bytes).to_bytes(2, "big") + text_bytes)
        if tag in _STRING_TAGS:
            return str(value).encode("utf-8")
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        raise ValueError(f"No se puede serializar el valor {value!r} con etiqueta {tag.name}")

    @staticmethod
    def _decode(data: bytes) -> Tuple[IPPMessage, int]:
        # Verificar tamaño mínimo del encabezado (8 bytes)
        if len(data) < 8:
            raise DecodeError("Mensaje IPP demasiado corto")

        stream = io.BytesIO(data)
        version_major, version_minor, code, request_id = struct.unpack(">BBHI", stream.read(8))
        message = IPPMessage(version_major, version_minor)
        message.request_id = request_id

        logger.debug(
            f"Parseando IPP: version={version_major}.{version_minor}, "
            f"codigo=0x{code:04x}, request_id={request_id}, bytes={len(data)}"
        )

        current_group: Optional[Dict[str, IPPAttribute]] = None
        last_attribute: Optional[IPPAttribute] = None
        groups = {tag: attributes for tag, attributes in message.groups()}

        while True:
            tag_bytes = stream.read(1)
            if not tag_bytes:
                raise DecodeError("Falta la etiqueta de fin de atributos")
            tag = tag_bytes[0]

            if tag == IPPTag.END_OF_ATTRIBUTES_TAG:
                # Fin de atributos, lo restante es el documento
                message.document_data = stream.read()
                break

            # Delimitadores de grupo; los grupos desconocidos se leen y se descartan
            if tag <= 0x0f:
                current_group = groups.get(tag, {})
                last_attribute = None
                continue

            if current_group is None:
                raise DecodeError(f"Atributo fuera de un grupo (tag=0x{tag:02x})")

            value_tag = IPPTag(tag)
            name, value_bytes = IPPParser._read_name_value(stream)
            if value_tag == IPPTag.BEGIN_COLLECTION:
                value = IPPParser._read_collection(stream)
            else:
                value = IPPParser._parse_value(value_tag, value_bytes)

            if name:
                last_attribute = IPPAttribute(name, value_tag, [value])
                current_group[name] = last_attribute
            elif last_attribute is not None:
                last_attribute.values.append(value)
            else:
                raise DecodeError("Valor adicional sin atributo previo")

        return message, code

    # Lee nombre y valor con sus longitudes de 2 bytes
    @staticmethod
    def _read_name_value(stream: io.BytesIO) -> Tuple[str, bytes]:
        name_length_bytes = stream.read(2)
        if len(name_length_bytes) < 2:
            raise DecodeError("Datos insuficientes para longitud de nombre")
        name_length = struct.unpack(">H", name_length_bytes)[0]
        name_bytes = stream.read(name_length)
        if len(name_bytes) < name_length:
            raise DecodeError("Nombre de atributo truncado")

        value_length_bytes = stream.read(2)
        if len(value_length_bytes) < 2:
            raise DecodeError("Datos insuficientes para longitud de valor")
        value_length = struct.unpack(">H", value_length_bytes)[0]
        value_bytes = stream.read(value_length)
        if len(value_bytes) < value_length:
            raise DecodeError("Valor de atributo truncado")

        try:
            return name_bytes.decode("utf-8"), value_bytes
        except UnicodeDecodeError as e:
            raise DecodeError(f"Nombre de atributo no es UTF-8: {e}") from e

    # Lee los miembros de una colección hasta endCollection
    @staticmethod
    def _read_collection(stream: io.BytesIO) -> Dict[str, IPPAttribute]:
        members: Dict[str, IPPAttribute] = {}
        current: Optional[IPPAttribute] = None

        while True:
            tag_bytes = stream.read(1)
            if not tag_bytes:
                raise DecodeError("Colección sin endCollection")
            tag = IPPTag(tag_bytes[0])
            _, value_bytes = IPPParser._read_name_value(stream)

            if tag == IPPTag.END_COLLECTION:
                return members
            if tag == IPPTag.MEMBER_ATTR_NAME:
                member_name = value_bytes.decode("utf-8", errors="replace")
                current = IPPAttribute(member_name, tag, [])
                members[member_name] = current
                continue
            if current is None:
                raise DecodeError("Valor de colección sin memberAttrName")

            if tag == IPPTag.BEGIN_COLLECTION:
                value = IPPParser._read_collection(stream)
            else:
                value = IPPParser._parse_value(tag, value_bytes)
            if not current.values:
                current.tag = tag
            current.values.append(value)

    # Parsea valor según etiqueta (enteros, booleanos, textos, binarios, etc.)
    @staticmethod
    def _parse_value(tag: IPPTag, value_bytes: bytes) -> Any:
        if tag.is_out_of_band:
            return None

        try:
            if tag == IPPTag.INTEGER or tag == IPPTag.ENUM:
                return struct.unpack(">i", value_bytes)[0]
            elif tag == IPPTag.BOOLEAN:
                return value_bytes[0] != 0
            elif tag in _STRING_TAGS:
                return value_bytes.decode("utf-8", errors="replace")
            elif tag in (IPPTag.TEXT_WITH_LANGUAGE, IPPTag.NAME_WITH_LANGUAGE):
                # Se conserva solo el texto; el idioma se descarta
                language_length = struct.unpack(">H", value_bytes[:2])[0]
                offset = 2 + language_length
                text_length = struct.unpack(">H", value_bytes[offset:offset + 2])[0]
                return value_bytes[offset + 2:offset + 2 + text_length].decode("utf-8", errors="replace")
            elif tag == IPPTag.DATETIME:
                # RFC 2579 DateAndTime (año, mes, día, hora, min, seg, décimas, dirección UTC, horas, minutos)
                return struct.unpack(">HBBBBBBcBB", value_bytes)
            elif tag == IPPTag.RESOLUTION:
                # Resolución (cross-feed, feed, unidades)
                return struct.unpack(">iiB", value_bytes)
            elif tag == IPPTag.RANGE_OF_INTEGER:
                # Rango (inferior, superior)
                return struct.unpack(">ii", value_bytes)
            else:
                return value_bytes

        except (struct.error, IndexError) as e:
            logger.warning(f"Error al parsear valor para tag {tag.name}: {e}")
            return value_bytes
