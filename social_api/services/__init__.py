# Services package.
#
# comment_like_service: like / unlike toggle for comments, with the
#                       post engagement score and author notification
#
# Functions that read take an AsyncSession as their first argument and
# leave the transaction to the ``get_db`` dependency.  The toggle is the
# exception: it takes the session factory and owns its transaction.
