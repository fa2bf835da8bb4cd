"""Runtime support for generated client bindings."""

from .client import BotBase as BotBase
from .serialization import BindingError as BindingError
from .serialization import DecodingError as DecodingError
from .serialization import EncodingError as EncodingError
from .serialization import FileKindError as FileKindError
from .serialization import Interface as Interface
from .serialization import MediaStruct as MediaStruct
from .serialization import Struct as Struct
from .serialization import WireFieldInfo as WireFieldInfo
from .serialization import attach_file as attach_file
from .serialization import attach_media as attach_media
from .serialization import attach_media_list as attach_media_list
from .serialization import decode_bool as decode_bool
from .serialization import decode_dual_result as decode_dual_result
from .serialization import decode_float as decode_float
from .serialization import decode_int as decode_int
from .serialization import decode_result as decode_result
from .serialization import decode_str as decode_str
from .serialization import decode_struct as decode_struct
from .serialization import encode_json as encode_json
from .serialization import format_bool as format_bool
from .serialization import format_float as format_float
from .serialization import format_int as format_int
from .serialization import list_of as list_of
from .serialization import wire_field as wire_field
from .types import InputFile as InputFile
from .types import NamedFile as NamedFile
from .types import RequestOpts as RequestOpts
