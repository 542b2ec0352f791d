"""Typed requests and replies for the developer provisioning services."""