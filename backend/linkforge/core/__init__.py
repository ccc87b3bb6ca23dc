"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default founder creation
- db: Database configuration, connection management and the storage timeout guard
- errors: Service-level exceptions rendered by the app's exception handler
- security: Password hashing and JWT access tokens
"""
