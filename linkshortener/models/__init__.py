from linkshortener.models.link_record_model import LinkRecordModel
from linkshortener.models.response_key import ResponseKey, ResponseOperation


__all__ = [
    'LinkRecordModel',
    'ResponseKey',
    'ResponseOperation',
]
