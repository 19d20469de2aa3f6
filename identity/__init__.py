"""Identity bounded context.

Users, groups, vaults and the relationships between them (memberships and
vault access grants), reconciled against a password-manager organization.
"""
