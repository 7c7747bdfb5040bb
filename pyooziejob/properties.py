import re
from collections.abc import Mapping
from io import StringIO

from pyooziejob.errors import PropertiesReadError

PROJECT_ROOT = 'oozieProjectRoot'

# characters XML 1.0 does not allow anywhere in a document
_invalidXMLChars = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')

def escape_text(value):
   text = _invalidXMLChars.sub('',str(value))
   return text.replace('&','&amp;').replace('<','&lt;').replace('>','&gt;')

def write_property(xml,name,value):
   xml.write('  <property>\n')
   xml.write('    <name>')
   xml.write(escape_text(name))
   xml.write('</name>\n')
   xml.write('    <value>')
   if type(value)==bool:
      if value:
         xml.write('true')
      else:
         xml.write('false')
   elif value is not None:
      xml.write(escape_text(value))
   xml.write('</value>\n')
   xml.write('  </property>\n')


class PropertiesSource:
   """Where the job configuration XML comes from."""

   def to_xml(self):
      raise NotImplementedError()

   def project_root(self):
      return None

class MappingProperties(PropertiesSource):
   """Job properties as name/value pairs, serialized into a configuration document."""

   def __init__(self,mapping):
      self.mapping = mapping

   def to_xml(self):
      xml = StringIO()
      xml.write('<?xml version="1.0" encoding="UTF-8"?>\n<configuration>\n')
      for name in self.mapping:
         write_property(xml,name,self.mapping[name])
      xml.write('</configuration>\n')
      return xml.getvalue()

   def project_root(self):
      return self.mapping.get(PROJECT_ROOT)

   def __repr__(self):
      return 'MappingProperties({!r})'.format(self.mapping)

class FileProperties(PropertiesSource):
   """Job properties read verbatim from a local XML file.

   The file's bytes are returned untouched so that its own encoding
   declaration still holds when it is posted.
   """

   def __init__(self,path):
      self.path = path

   def to_xml(self):
      try:
         with open(self.path,'rb') as xml:
            return xml.read()
      except OSError as err:
         raise PropertiesReadError('Cannot read properties from {}: {}'.format(self.path,err),path=self.path) from err

   def __repr__(self):
      return 'FileProperties({!r})'.format(self.path)

class RawXMLProperties(PropertiesSource):
   """Pre-built configuration XML, passed through without any checking."""

   def __init__(self,xml):
      self.xml = xml

   def to_xml(self):
      return self.xml

   def __repr__(self):
      return 'RawXMLProperties({!r})'.format(self.xml)

def properties_source(value):
   """Wraps a plain value in the matching :class:`PropertiesSource`.

   A mapping becomes name/value pairs. A string containing ``<`` is taken as
   literal XML; any other string is a path to a local XML file.
   """
   if value is None or isinstance(value,PropertiesSource):
      return value
   if isinstance(value,Mapping):
      return MappingProperties(value)
   if isinstance(value,str):
      if '<' in value:
         return RawXMLProperties(value)
      return FileProperties(value)
   raise TypeError('Unsupported properties type: {}'.format(type(value)))
