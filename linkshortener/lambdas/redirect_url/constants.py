LAMBDA_NAME = 'redirect_url'

# Log events
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
