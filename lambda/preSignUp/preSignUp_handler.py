"""
A4E Cognito Pre Sign-Up Hook

Rejects sign-ups whose email domain is not allowed. Cognito turns the raised
exception into a sign-up error shown to the user.

Environment Variables:
- ALLOWED_EMAIL_DOMAINS: comma separated list of domains (e.g. "example.com,example.org").
  An empty list allows every domain.

Input Event Structure:
- request.userAttributes.email: email the user signs up with

Output Structure:
- the unchanged event, as Cognito expects
"""

import logging
import os


logger = logging.getLogger()
logger.setLevel(logging.INFO)

def allowed_domains():
    raw = os.environ.get('ALLOWED_EMAIL_DOMAINS', '')
    return [domain.strip().lower() for domain in raw.split(',') if domain.strip()]

def email_domain(email):
    if not email or '@' not in email:
        raise ValueError('A valid email address is required to sign up')
    return email.rsplit('@', 1)[1].strip().lower()

def handler(event, context):
    email = event.get('request', {}).get('userAttributes', {}).get('email')
    domain = email_domain(email)

    domains = allowed_domains()
    if domains and domain not in domains:
        logger.info(f"rejected sign-up from domain {domain}")
        raise Exception(f"Email domain {domain} is not allowed to sign up")

    logger.info(f"accepted sign-up from domain {domain}")
    return event
