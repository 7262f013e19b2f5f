"""
Base command: per-subcommand option groups and client construction.

Every subcommand subclasses BaseCommand, declares the option groups it needs
through flag_set(FlagSetBit...) and calls client() once its flags are parsed.

- flag_set() builds the FlagSets at most once per command instance, even
  when several threads ask for it at the same time; every caller receives
  the same instance.
- client() reads the parsed flag attributes, applies them on top of the
  environment and returns an authenticated Client. A client injected at
  construction is returned as-is instead.
"""
import datetime
import enum
import logging
import os
import threading

from .api import ENV_VAULT_FORMAT, default_config
from .bootstrap import ClientOptions, build_client, wrapping_lookup
from .completion import PredictAnything, PredictDirs, PredictFiles, PredictNothing, PredictSet
from .faults import EnvironmentReadError
from .flags import FlagSets
from .utils import Ref

logger = logging.getLogger(__name__)


class FlagSetBit(enum.IntFlag):
    NONE = 1 << 0
    HTTP = 1 << 1
    OUTPUT_FIELD = 1 << 2
    OUTPUT_FORMAT = 1 << 3


class BaseCommand:
    """
    Shared state and helpers of every subcommand.

    Parameters
    - ui: terminal output (see vaultcli.ui).
    - token_helper: factory returning a TokenHelper, consulted when the
      environment carries no token.
    - client: pre-built Client returned by client() without any bootstrap.
    - environ: environment mapping (os.environ by default).
    """

    def __init__(self, ui, /, token_helper=None, client=None, environ=None):
        self.ui = ui
        self.token_helper = token_helper
        self.environ = os.environ if environ is None else environ

        self.flag_address = ""
        self.flag_ca_cert = ""
        self.flag_ca_path = ""
        self.flag_client_cert = ""
        self.flag_client_key = ""
        self.flag_tls_server_name = ""
        self.flag_tls_skip_verify = False
        self.flag_wrap_ttl = datetime.timedelta()

        self.flag_format = ""
        self.flag_field = ""

        self._client = client
        self._flags = None
        self._flags_lock = threading.Lock()

    def client_options(self):
        return ClientOptions(
            address=self.flag_address,
            ca_cert=self.flag_ca_cert,
            ca_path=self.flag_ca_path,
            client_cert=self.flag_client_cert,
            client_key=self.flag_client_key,
            tls_server_name=self.flag_tls_server_name,
            tls_skip_verify=self.flag_tls_skip_verify,
            wrap_ttl=self.flag_wrap_ttl,
        )

    def client(self):
        """
        Return the API client built from the environment and the parsed flags.
        """
        if self._client is not None:
            return self._client

        config = default_config()
        try:
            config.read_environment(self.environ)
        except ValueError as e:
            raise EnvironmentReadError("failed to read environment") from e

        return build_client(config, self.client_options(), token_helper=self.token_helper, environ=self.environ)

    def default_wrapping_lookup_func(self, operation, path, /):
        """
        Wrapping lookup honouring -wrap-ttl, defaulting to the API policy.
        """
        return wrapping_lookup(self.flag_wrap_ttl, environ=self.environ)(operation, path)

    def flag_set(self, bits, /):
        """
        Return the flag sets for this command, building them on first use.
        """
        if self._flags is not None:
            return self._flags

        with self._flags_lock:
            if self._flags is None:
                self._flags = self._build_flag_set(FlagSetBit(bits))
        return self._flags

    def _build_flag_set(self, bits, /):
        flags = FlagSets(self.ui, environ=self.environ)

        if bits & FlagSetBit.HTTP:
            f = flags.new_flag_set("HTTP Options")

            f.string_var(
                "address",
                target=Ref(self, "flag_address"),
                default="https://127.0.0.1:8200",
                env_var="VAULT_ADDR",
                completion=PredictAnything,
                usage="Address of the Vault server.",
            )

            f.string_var(
                "ca-cert",
                target=Ref(self, "flag_ca_cert"),
                default="",
                env_var="VAULT_CACERT",
                completion=PredictFiles("*"),
                usage="Path on the local disk to a single PEM-encoded CA "
                      "certificate to verify the Vault server's SSL certificate. This "
                      "takes precedence over -ca-path.",
            )

            f.string_var(
                "ca-path",
                target=Ref(self, "flag_ca_path"),
                default="",
                env_var="VAULT_CAPATH",
                completion=PredictDirs("*"),
                usage="Path on the local disk to a directory of PEM-encoded CA "
                      "certificates to verify the Vault server's SSL certificate.",
            )

            f.string_var(
                "client-cert",
                target=Ref(self, "flag_client_cert"),
                default="",
                env_var="VAULT_CLIENT_CERT",
                completion=PredictFiles("*"),
                usage="Path on the local disk to a single PEM-encoded CA "
                      "certificate to use for TLS authentication to the Vault server. If "
                      "this flag is specified, -client-key is also required.",
            )

            f.string_var(
                "client-key",
                target=Ref(self, "flag_client_key"),
                default="",
                env_var="VAULT_CLIENT_KEY",
                completion=PredictFiles("*"),
                usage="Path on the local disk to a single PEM-encoded private key "
                      "matching the client certificate from -client-cert.",
            )

            f.string_var(
                "tls-server-name",
                target=Ref(self, "flag_tls_server_name"),
                default="",
                env_var="VAULT_TLS_SERVER_NAME",
                completion=PredictAnything,
                usage="Name to use as the SNI host when connecting to the Vault "
                      "server via TLS.",
            )

            f.bool_var(
                "tls-skip-verify",
                target=Ref(self, "flag_tls_skip_verify"),
                default=False,
                env_var="VAULT_SKIP_VERIFY",
                completion=PredictNothing,
                usage="Disable verification of TLS certificates. Using this option "
                      "is highly discouraged and decreases the security of data "
                      "transmissions to and from the Vault server.",
            )

            f.duration_var(
                "wrap-ttl",
                target=Ref(self, "flag_wrap_ttl"),
                default=0,
                env_var="VAULT_WRAP_TTL",
                completion=PredictAnything,
                usage="Wraps the response in a cubbyhole token with the requested "
                      "TTL. The response is available via the \"vault unwrap\" command. "
                      "The TTL is specified as a numeric string with suffix like \"30s\" "
                      "or \"5m\".",
            )

        if bits & (FlagSetBit.OUTPUT_FIELD | FlagSetBit.OUTPUT_FORMAT):
            f = flags.new_flag_set("Output Options")

            if bits & FlagSetBit.OUTPUT_FIELD:
                f.string_var(
                    "field",
                    target=Ref(self, "flag_field"),
                    default="",
                    env_var="",
                    completion=PredictAnything,
                    usage="Print only the field with the given name. Specifying "
                          "this option will take precedence over other formatting "
                          "directives. The result will not have a trailing newline "
                          "making it ideal for piping to other processes.",
                )

            if bits & FlagSetBit.OUTPUT_FORMAT:
                f.string_var(
                    "format",
                    target=Ref(self, "flag_format"),
                    default="table",
                    env_var=ENV_VAULT_FORMAT,
                    completion=PredictSet("table", "json", "yaml"),
                    usage="Print the output in the given format. Valid formats "
                          "are \"table\", \"json\", or \"yaml\".",
                )

        return flags

    def close(self):
        if self._flags is not None:
            self._flags.close()


__all__ = (
    "BaseCommand",
    "FlagSetBit",
)
