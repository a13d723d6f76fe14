"""
The `~certbot_dns_zoneedit.dns_zoneedit` plugin automates the process of
completing a ``dns-01`` challenge (`~acme.challenges.DNS01`) by creating, and
subsequently removing, TXT records through the ZoneEdit control panel.

ZoneEdit offers no API for editing records, so the plugin logs in to
``cp.zoneedit.com`` with your account credentials and static second factor
token, and submits the TXT record editor's form the way a browser would.


Named Arguments
---------------

========================================  =====================================
``--dns-zoneedit-credentials``            ZoneEdit credentials_ INI file.
                                          (Required)
``--dns-zoneedit-propagation-seconds``    The number of seconds to wait for DNS
                                          to propagate before asking the ACME
                                          server to verify the DNS record.
                                          (Default: 120)
========================================  =====================================


Credentials
-----------

Use of this plugin requires a configuration file containing your ZoneEdit
login name, password and second factor token.

.. code-block:: ini
   :name: credentials.ini
   :caption: Example credentials file:

   # ZoneEdit credentials used by Certbot
   dns_zoneedit_user = myaccount
   dns_zoneedit_password = 0123456789abcdef
   dns_zoneedit_token = 0123456789abcdef0123456789abcdef

The path to this file can be provided interactively or using the
``--dns-zoneedit-credentials`` command-line argument. Certbot records the path
to this file for use during renewal, but does not store the file's contents.

.. caution::
   You should protect these credentials as you would the password to your
   ZoneEdit account. Users who can read this file can log in to the control
   panel and change any record of any domain in the account.

The logged in session is cached in Certbot's work directory for 30 minutes so
that the cleanup step and renewals of several names in one run do not log in
again. The cache holds session cookies only, never the password.

.. note::
   This plugin keeps a single TXT value per host. A wildcard name
   and its apex (``*.example.com`` and ``example.com``) are validated through
   the same ``_acme-challenge.example.com`` record, so the second challenge
   overwrites the first and one of the two validations fails. Request such
   certificates in two runs, or validate the apex with another method.


Command line
------------

The package also installs ``certbot-zoneedit``, usable on its own or as a
manual hook. It reads ``ZONEEDIT_USER``, ``ZONEEDIT_PASS`` and
``ZONEEDIT_TOKEN`` from the environment.

.. code-block:: bash

   certbot-zoneedit add www.example.com "validation-string"
   certbot-zoneedit del www.example.com

When no domain is given, ``CERTBOT_DOMAIN`` and ``CERTBOT_VALIDATION`` are
used, so ``--manual-auth-hook "certbot-zoneedit add"`` and
``--manual-cleanup-hook "certbot-zoneedit del"`` work with ``certbot --manual``.


Examples
--------

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``

   certbot certonly \\
     --authenticator dns-zoneedit \\
     --dns-zoneedit-credentials ~/.secrets/certbot/zoneedit.ini \\
     -d example.com

.. code-block:: bash
   :caption: To acquire a single certificate for both ``example.com`` and
             ``www.example.com``

   certbot certonly \\
     --authenticator dns-zoneedit \\
     --dns-zoneedit-credentials ~/.secrets/certbot/zoneedit.ini \\
     -d example.com \\
     -d www.example.com

.. code-block:: bash
   :caption: To acquire a certificate for ``example.com``, waiting 300 seconds
             for DNS propagation

   certbot certonly \\
     --authenticator dns-zoneedit \\
     --dns-zoneedit-credentials ~/.secrets/certbot/zoneedit.ini \\
     --dns-zoneedit-propagation-seconds 300 \\
     -d example.com

"""
