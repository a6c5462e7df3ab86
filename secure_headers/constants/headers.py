"""
Header and Directive Constants

Names of the emitted response headers and the fixed order in which CSP
directives are rendered. The order has no effect on how browsers enforce the
policy but keeps the header stable for debugging and tests.
"""

CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"

UPGRADE_INSECURE_REQUESTS = "upgrade-insecure-requests"

# (directive name, options field)
DIRECTIVE_ORDER = [
    ("default-src", "default_src"),
    ("script-src", "script_src"),
    ("style-src", "style_src"),
    ("img-src", "img_src"),
    ("font-src", "font_src"),
    ("object-src", "object_src"),
    ("base-uri", "base_uri"),
    ("frame-src", "frame_src"),
    ("form-action", "form_action"),
    ("frame-ancestors", "frame_ancestors"),
    ("worker-src", "worker_src"),
    ("connect-src", "connect_src"),
]

# Directives whose value embeds the nonce unless overridden
NONCE_DIRECTIVES = {"script_src", "style_src"}

# (header name, options field), emitted only when the value is non-empty
AUXILIARY_HEADERS = [
    ("X-XSS-Protection", "xss_protection"),
    ("X-Frame-Options", "frame_options"),
    ("X-Content-Type-Options", "content_type_options"),
    ("Referrer-Policy", "referrer_policy"),
    ("Permissions-Policy", "permissions_policy"),
    ("Cache-Control", "cache_control"),
]

# Localization library aliases registered when i18n processing is enabled
I18N_PACKAGE = "vue-i18n"
I18N_DEV_BUILD = "vue-i18n/dist/vue-i18n.esm-browser.js"
I18N_PROD_BUILD = "vue-i18n/dist/vue-i18n.esm-browser.prod.js"
