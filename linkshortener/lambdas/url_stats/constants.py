LAMBDA_NAME = 'url_stats'

# Log events
STATS_RETRIEVED = 'STATS_RETRIEVED'
