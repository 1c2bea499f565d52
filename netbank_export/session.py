import importlib
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Type

from .exceptions import SessionError
from .models import Account, HistoryResult

logger = logging.getLogger(__name__)


class NetbankSession(ABC):
    """
    Abstract base class for the authenticated banking session.

    Implementations log on to the banking site and turn what it returns into
    `Account` and `HistoryResult` records. Everything downstream of this class
    (serializers, templating, the exporter) is offline and never sees how the
    data was fetched.
    """

    @abstractmethod
    def logon(self, username: str, password: str) -> List[Account]:
        """
        Authenticate and return the customer's accounts.

        Raises SessionError when the credentials are rejected or the site
        cannot be reached.
        """
        pass

    @abstractmethod
    def download_history(self, account: Account, from_date: Optional[date] = None,
                         to_date: Optional[date] = None) -> HistoryResult:
        """
        Retrieve posted and pending transactions for `account`.

        With no range the implementation returns its default window, which is
        what the pending-only download relies on.
        """
        pass


def load_session_class(path: str) -> Type[NetbankSession]:
    """
    Resolve a 'package.module:ClassName' path to a NetbankSession subclass.
    """
    if not path or ':' not in path:
        raise SessionError(f"Session class must be given as 'module:Class', got {path!r}")

    module_name, _, class_name = path.partition(':')
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SessionError(f"Cannot import session module '{module_name}': {e}") from e

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, NetbankSession):
        raise SessionError(f"'{path}' is not a NetbankSession implementation")

    logger.debug(f"Using session implementation {path}")
    return cls
