# Services package.
#
# Each module is the data-access layer for one resource:
#
#   company_service  - CRUD + filtered listing for Company
#   job_service      - CRUD + filtered listing for Job
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``jobly.exceptions``
# types; store errors that have no typed counterpart propagate as-is.
