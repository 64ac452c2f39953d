# Services package.
#
# Each module exposes async functions that hold the business rules and
# database access for one aggregate:
#
#   comment_service : CRUD + ownership checks + cache for Comment
#   like_service    : like / unlike a Post
#   user_service    : User lookup by id
#
# All service functions take an AsyncSession as their first argument so
# the router layer controls the transaction boundary via ``get_db``.
# Writes take the acting user id explicitly.
