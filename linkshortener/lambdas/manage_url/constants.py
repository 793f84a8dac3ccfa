LAMBDA_NAME = 'manage_url'

ALLOWED_METHODS = ['GET', 'PUT', 'DELETE']

# Log events
LINK_RETRIEVED = 'LINK_RETRIEVED'
LINK_UPDATED = 'LINK_UPDATED'
LINK_DELETED = 'LINK_DELETED'
UNSUPPORTED_METHOD = 'UNSUPPORTED_METHOD'
