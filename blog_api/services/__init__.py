# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   article_service : CRUD + filtered pagination + ownership checks for Article
#   user_service    : registration, login and profile updates for User
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``blog_api.exceptions``
# errors, which the app renders as HTTP responses.
