"""
Business logic services for the online judge.

Modules are imported directly (``from onlinejudge.services.dispatcher import
Dispatcher``); schemas depend on the reconciler's spec types, so this package
does not import its submodules eagerly.
"""
