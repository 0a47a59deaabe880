from enum import Enum


class Action(Enum):
    CREATE_QUEUE = "CreateQueue"
    GET_QUEUE_URL = "GetQueueUrl"
    LIST_QUEUES = "ListQueues"
    SEND_MESSAGE = "SendMessage"
    RECEIVE_MESSAGE = "ReceiveMessage"
    DELETE_MESSAGE = "DeleteMessage"

    @property
    def queue_scoped(self) -> bool:
        """
        Message actions must be sent to the queue's own URL, queue management
        actions to the account root. Mixing them up gets rejected by SQS.
        """
        return self in (
            Action.SEND_MESSAGE,
            Action.RECEIVE_MESSAGE,
            Action.DELETE_MESSAGE,
        )
