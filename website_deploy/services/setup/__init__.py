"""Setup (provisioning) services.

Each service here expresses one provisioning flow (bucket, certificate,
distribution, DNS) as ordered ProvisioningOrchestrator steps.
"""
