from pyaction.security.cipher import Cipher, CipherInterface, SimpleCipher

__all__ = ['Cipher', 'CipherInterface', 'SimpleCipher']
