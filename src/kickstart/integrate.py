"""Add the ZendFi SDK to an existing JavaScript project.

Writes a client module, a webhook handler and an env file at the locations
the detected framework expects. Files that already exist are left alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from kickstart.detection import (
    EnvironmentDetector,
    Framework,
    FrameworkInfo,
    FrameworkPaths,
    get_framework_paths,
)
from kickstart.install import DependencyInstaller, InstallResult
from kickstart.scaffold import substitute

logger = logging.getLogger(__name__)

SDK_PACKAGE = "@zendfi/sdk"

CLIENT_TEMPLATE = """\
/**
 * ZendFi SDK client.
 *
 * Reads ZENDFI_API_KEY and ZENDFI_ENVIRONMENT from the environment.
 */

{{IMPORT}}

{{EXPORT}} = new ZendFiClient();
"""

NEXT_APP_WEBHOOK = """\
import { createNextWebhookHandler } from '@zendfi/sdk/nextjs';

/**
 * ZendFi webhook handler. Signatures are verified before handlers run.
 */
export const POST = createNextWebhookHandler({
  secret: process.env.ZENDFI_WEBHOOK_SECRET{{NON_NULL}},
  handlers: {
    'payment.confirmed': async (payment) => {
      console.log('Payment confirmed:', payment.payment_id);
      // Fulfill the order here.
    },
    'payment.failed': async (payment) => {
      console.log('Payment failed:', payment.payment_id);
      // Mark the order as failed here.
    },
  },
});
"""

NEXT_PAGES_WEBHOOK = """\
{{TYPE_IMPORT}}import { verifyWebhook } from '@zendfi/sdk';

export default async function handler(req{{REQ_TYPE}}, res{{RES_TYPE}}) {
  if (req.method !== 'POST') {
    return res.status(405).json({ error: 'Method not allowed' });
  }

  try {
    const event = await verifyWebhook({
      body: req.body,
      signature: req.headers['x-zendfi-signature']{{AS_STRING}},
      secret: process.env.ZENDFI_WEBHOOK_SECRET{{NON_NULL}},
    });

    switch (event.type) {
      case 'payment.confirmed':
        console.log('Payment confirmed:', event.data.payment_id);
        break;
      case 'payment.failed':
        console.log('Payment failed:', event.data.payment_id);
        break;
    }

    res.status(200).json({ received: true });
  } catch (error) {
    console.error('Webhook error:', error);
    res.status(400).json({ error: 'Webhook verification failed' });
  }
}
"""

ROUTER_WEBHOOK = """\
{{IMPORT}}

const router = Router();

/**
 * ZendFi webhook handler.
 * POST /webhooks/zendfi
 */
router.post('/webhooks/zendfi', async (req{{REQ_TYPE}}, res{{RES_TYPE}}) => {
  try {
    const event = await verifyWebhook({
      body: req.body,
      signature: req.headers['x-zendfi-signature']{{AS_STRING}},
      secret: process.env.ZENDFI_WEBHOOK_SECRET{{NON_NULL}},
    });

    switch (event.type) {
      case 'payment.confirmed':
        console.log('Payment confirmed:', event.data.payment_id);
        break;
      case 'payment.failed':
        console.log('Payment failed:', event.data.payment_id);
        break;
    }

    res.json({ received: true });
  } catch (error) {
    console.error('Webhook error:', error);
    res.status(400).json({ error: 'Webhook verification failed' });
  }
});

{{EXPORT}}
"""

ENV_TEMPLATE = """\
# ZendFi Configuration
# Get your API key from: https://app.zendfi.com/settings/api-keys

ZENDFI_API_KEY=zfi_test_your_key_here
ZENDFI_WEBHOOK_SECRET=whsec_your_secret_here

# development or production
ZENDFI_ENVIRONMENT=development
"""


def _ts_variables(has_typescript: bool) -> dict[str, str]:
    return {
        "NON_NULL": "!" if has_typescript else "",
        "AS_STRING": " as string" if has_typescript else "",
    }


def generate_client_file(framework: Framework, has_typescript: bool) -> str:
    """Render the SDK client module."""
    if has_typescript or framework.is_nextjs:
        variables = {
            "IMPORT": "import { ZendFiClient } from '@zendfi/sdk';",
            "EXPORT": "export const zendfi" + (": ZendFiClient" if has_typescript else ""),
        }
    else:
        variables = {
            "IMPORT": "const { ZendFiClient } = require('@zendfi/sdk');",
            "EXPORT": "module.exports.zendfi",
        }
    return substitute(CLIENT_TEMPLATE, variables)


def _next_app_webhook(has_typescript: bool) -> str:
    return substitute(NEXT_APP_WEBHOOK, _ts_variables(has_typescript))


def _next_pages_webhook(has_typescript: bool) -> str:
    variables = _ts_variables(has_typescript)
    if has_typescript:
        variables.update(
            TYPE_IMPORT="import type { NextApiRequest, NextApiResponse } from 'next';\n",
            REQ_TYPE=": NextApiRequest",
            RES_TYPE=": NextApiResponse",
        )
    else:
        variables.update(TYPE_IMPORT="", REQ_TYPE="", RES_TYPE="")
    return substitute(NEXT_PAGES_WEBHOOK, variables)


def _router_webhook(has_typescript: bool) -> str:
    variables = _ts_variables(has_typescript)
    if has_typescript:
        variables.update(
            IMPORT=(
                "import { Router, Request, Response } from 'express';\n"
                "import { verifyWebhook } from '@zendfi/sdk';"
            ),
            REQ_TYPE=": Request",
            RES_TYPE=": Response",
            EXPORT="export default router;",
        )
    else:
        variables.update(
            IMPORT=(
                "const { Router } = require('express');\n"
                "const { verifyWebhook } = require('@zendfi/sdk');"
            ),
            REQ_TYPE="",
            RES_TYPE="",
            EXPORT="module.exports = router;",
        )
    return substitute(ROUTER_WEBHOOK, variables)


# Every Framework member must have an entry; see tests/test_integrate.py.
WEBHOOK_GENERATORS = {
    Framework.NEXTJS_APP: _next_app_webhook,
    Framework.NEXTJS_PAGES: _next_pages_webhook,
    Framework.EXPRESS: _router_webhook,
    Framework.REACT: _router_webhook,
    Framework.VUE: _router_webhook,
    Framework.SVELTE: _router_webhook,
    Framework.NODE: _router_webhook,
    Framework.UNKNOWN: _router_webhook,
}


def generate_webhook_file(framework: Framework, has_typescript: bool) -> str:
    """Render the webhook handler for ``framework``."""
    return WEBHOOK_GENERATORS[framework](has_typescript)


def generate_env_file() -> str:
    return ENV_TEMPLATE


@dataclass
class IntegrationResult:
    """What integrate wrote, skipped and installed."""

    framework: FrameworkInfo
    paths: FrameworkPaths
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    install: InstallResult | None = None


class Integrator:
    """Adds the SDK client, webhook handler and env file to a project."""

    def __init__(self, detector: EnvironmentDetector, installer: DependencyInstaller) -> None:
        self._detector = detector
        self._installer = installer

    def detect(self, path: Path) -> FrameworkInfo:
        """Detect the project's framework.

        Raises:
            MissingManifestError: If ``path`` has no package.json.
        """
        return self._detector.detect(path, require_manifest=True)

    def integrate(
        self,
        path: Path,
        skip_install: bool = False,
        info: FrameworkInfo | None = None,
    ) -> IntegrationResult:
        """Write the integration files and install the SDK.

        Args:
            path: Project root containing package.json.
            skip_install: Don't add the SDK package.
            info: A detection result to reuse instead of detecting again.

        Raises:
            MissingManifestError: If ``path`` has no package.json.
        """
        if info is None:
            info = self.detect(path)

        paths = get_framework_paths(info.framework, info.has_typescript)
        result = IntegrationResult(framework=info, paths=paths)

        files = {
            paths.lib_path: generate_client_file(info.framework, info.has_typescript),
            paths.webhook_path: generate_webhook_file(info.framework, info.has_typescript),
            paths.env_file: generate_env_file(),
        }
        for relative, content in files.items():
            target = path / relative
            if target.exists():
                logger.info("%s already exists, skipping", relative)
                result.skipped.append(relative)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            result.created.append(relative)

        if not skip_install:
            result.install = self._installer.add(path, info.package_manager, [SDK_PACKAGE])
        return result
