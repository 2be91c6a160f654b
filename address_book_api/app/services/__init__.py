"""
Service layer abstraction.

Each service encapsulates business logic for a domain and receives its
collaborators (repositories, token service, email sender, cache,
notification publisher) through its constructor.  ``main.create_app``
builds one instance of each and stores it on ``app.state``.
"""
