# Services package.
#
#   article_service  — create / read / list / update / delete and view
#                      counting for NewsArticle
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.
