# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for one resource:
#
#   auth_service      registration, login, logout, ownership gate
#   post_service      CRUD for Post, with comment counts
#   comment_service   CRUD for Comment, scoped to posts and authors
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency. They return snake_case dicts; the routers apply
# the casing adapter before responding.
