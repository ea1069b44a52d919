"""Connect Group choices"""

from enum import Enum


class ConnectGroup(str, Enum):
    """Known Connect Groups a guest can belong to"""

    ANGELA = "CG Angela"
    SAMUEL = "CG Samuel"
    EZRA = "CG Ezra"
    WILLIAM = "CG William"
    MARCIELLA = "CG Marciella"
    FELICIA_CLARA = "CG Felicia Clara"
    SHERLINE = "CG Sherline"


# Stored in place of a group name when the guest has not joined one
NO_CONNECT_GROUP = "-"

DEFAULT_CONNECT_GROUP = list(ConnectGroup)[0]

CONNECT_GROUP_NAMES = [group.value for group in ConnectGroup]
