from .wms.inventory import *  # noqa
from .wms.order_items import *  # noqa
from .wms.tasking import *  # noqa
from .wms.pick_issue import *  # noqa

# Transactional outbox (relayed to the device push channel by an external worker)
from app.events.outbox import *  # noqa
