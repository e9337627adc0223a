"""License and demo login logic."""

from __future__ import annotations

from typing import Protocol

from oskar.cloudauth import CloudAuthResponse, StatusCode
from oskar.licensestatus import LicenseStatus
from oskar.localauth import LocalAuth

OFFLINE_MESSAGE = "Bilgisayarınız internete bağlı değil. Lütfen internete bağlanıp tekrar deneyiniz."
END_OF_DEMO_MESSAGE = (
    "Ücretsiz deneme haklarınız tükenmiştir. Eğer ikoOSKAR'dan memnun kaldıysanız "
    "ve programı kullanmaya devam etmek istiyorsanız lütfen bizimle "
    "iletişime geçip bir lisans anahtarı satın alınız."
)


class AuthError(Exception):
    """A login or sign-up step failed; the message is meant for the user."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class _Cloud(Protocol):
    def is_online(self) -> bool: ...

    def set_demo_remainings(self, remainings: int) -> CloudAuthResponse: ...

    def activate_license(self, serial: str) -> CloudAuthResponse: ...


class Authenticator:
    """Decides whether the program may start, keeping local and remote state in step."""

    def __init__(self, cloud: _Cloud, local: LocalAuth) -> None:
        self._cloud = cloud
        self._local = local

    @property
    def is_demo(self) -> bool:
        return self._local.is_demo

    @property
    def serial(self) -> str:
        return self._local.serial

    @property
    def demo_remainings(self) -> int:
        return self._local.demo_remainings

    def login(self) -> str:
        """Return a success message, or raise AuthError if the program may not start."""
        if self._local.is_demo:
            if self._cloud.is_online():
                return self._synchronize_demo()
            if self._local.demo_remainings > 0:
                return ""
            raise AuthError(END_OF_DEMO_MESSAGE)

        serial = self._local.serial
        if not serial:
            raise AuthError()
        if self._cloud.is_online():
            return self._synchronize_license(serial)
        if self._local.demo_remainings > 0:
            return ""
        raise AuthError()

    def signup_licensed(self, serial: str) -> str:
        """Activate a license key and store it locally."""
        if not serial:
            raise AuthError("Lütfen lisans anahtarınızı giriniz.")
        if len(serial) < 3:
            raise AuthError("Lisans anahtarı 3 harften kısa olamaz.")
        if not self._cloud.is_online():
            raise AuthError(OFFLINE_MESSAGE)

        message = self._synchronize_license(serial)
        self._local.serial = serial
        self._local.is_demo = False
        return message

    def signup_demo(self) -> str:
        """Start the free trial."""
        if not self._cloud.is_online():
            raise AuthError(OFFLINE_MESSAGE)
        try:
            message = self._synchronize_demo()
        except AuthError:
            self._local.serial = ""
            self._local.is_demo = False
            raise
        self._local.serial = ""
        self._local.is_demo = True
        return message

    def decrease_demo_remainings(self) -> int:
        """Use up one demo run, synchronize with the service and return what is left."""
        self._local.demo_remainings = self._local.demo_remainings - 1
        self._synchronize_demo()
        return self._local.demo_remainings

    def license_status(self) -> LicenseStatus:
        if not self.is_demo:
            return LicenseStatus.ACTIVATED
        if self.demo_remainings > 0:
            return LicenseStatus.DEMO
        return LicenseStatus.END_OF_DEMO

    def _synchronize_license(self, serial: str) -> str:
        response = self._cloud.activate_license(serial)
        prefix = "Lisans anahtarı etkinleştirilemedi: "
        match response.status_code:
            case StatusCode.REACTIVATED:
                return "Lisans anahtarı yeniden etkinleştirildi."
            case StatusCode.ACTIVATED:
                return "Lisans anahtarı etkinleştirildi."
            case StatusCode.BAD_REQUEST:
                raise AuthError(prefix + "Hata kodu 400, hatalı istek.")
            case StatusCode.UNAUTHORIZED:
                raise AuthError(prefix + "Hata kodu 401, yetkisiz erişim.")
            case StatusCode.SERIAL_NOT_FOUND:
                raise AuthError(prefix + "Hata kodu 404, lisans anahtarı bulunamadı.")
            case _:
                raise AuthError(prefix + "Diğer hata: " + response.body)

    def _synchronize_demo(self) -> str:
        response = self._cloud.set_demo_remainings(self._local.demo_remainings)
        prefix = "Deneme sürümü etkinleştirilemedi: "
        match response.status_code:
            case StatusCode.REACTIVATED | StatusCode.ACTIVATED | StatusCode.END_OF_DEMO:
                remote = response.demo_remainings()
                self._local.demo_remainings = remote
                if remote > 0:
                    return "Deneme sürümü etkinleştirildi."
                raise AuthError(END_OF_DEMO_MESSAGE)
            case StatusCode.BAD_REQUEST:
                raise AuthError(prefix + "Hata kodu 400, hatalı istek.")
            case _:
                raise AuthError(prefix + "Diğer hata: " + response.body)