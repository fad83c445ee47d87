"""One-shot provisioning scripts, one per flow.

Run with ``python -m website_deploy.scripts.<name>``; configuration comes from
the environment (see ``website_deploy.services.config``).
"""
