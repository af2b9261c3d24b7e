# imports here allow aggregating types under http_vcr
# pylint: disable=useless-import-alias
from .adapters import HttpAdapter as HttpAdapter
from .adapters import HttpxAdapter as HttpxAdapter
from .body import BinaryBody as BinaryBody
from .body import Body as Body
from .body import TextBody as TextBody
from .config import VcrSettings as VcrSettings
from .config import create_vcr_transport as create_vcr_transport
from .errors import CassetteError as CassetteError
from .errors import CassetteFileError as CassetteFileError
from .errors import CassetteParseError as CassetteParseError
from .errors import RequestNotFoundError as RequestNotFoundError
from .errors import UnsupportedMethodError as UnsupportedMethodError
from .errors import VcrError as VcrError
from .middleware import VcrMiddleware as VcrMiddleware
from .models import Session as Session
from .models import VcrMode as VcrMode
from .models import VcrRequest as VcrRequest
from .models import VcrResponse as VcrResponse
from .redaction import CallableRedactor as CallableRedactor
from .redaction import HeaderRedactor as HeaderRedactor
from .redaction import Redactor as Redactor
from .store import Cassette as Cassette
from .store import CassetteRegistry as CassetteRegistry
from .transport import VcrTransport as VcrTransport
