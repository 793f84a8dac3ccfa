LAMBDA_NAME = 'shorten_url'

# Log events
LINK_SHORTENED = 'LINK_SHORTENED'
