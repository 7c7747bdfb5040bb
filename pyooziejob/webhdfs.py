from pyooziejob.client import Client, ServiceError

HTTPFS_PORT = 14000

def absolute_path(path):
   if len(path)==0 or path[0]!='/':
      path = '/'+path
   return path

class WebHDFS(Client):
   """Creates files in HDFS through the WebHDFS REST API.

   In httpfs mode the data is sent in the CREATE request itself, as the
   HttpFS gateway expects. Otherwise the namenode's redirect to a datanode
   is followed.
   """

   def __init__(self,host=None,port=HTTPFS_PORT,user_name=None,httpfs=True,**kwargs):
      super().__init__(service='webhdfs',host=host,port=port,**kwargs)
      self.user_name = user_name
      self.httpfs = httpfs

   def params(self,**params):
      if self.user_name is not None:
         params['user.name'] = self.user_name
      return params

   def copy(self,data,path,size=-1,overwrite=False):
      path = absolute_path(path)
      url = '{}{}'.format(self.service_url(),path)
      params = self.params(op='CREATE',overwrite='true' if overwrite else 'false')
      headers = {}
      headers['Content-Type'] = 'application/octet-stream'
      if size >= 0:
         headers['Content-Length'] = str(size)
      if self.httpfs:
         params['data'] = 'true'
         req = self.put(
            url,
            params=params,
            data=data,
            headers=headers)
         if req.status_code!=200 and req.status_code!=201:
            raise ServiceError(req.status_code,'Cannot copy to path {}'.format(path),req)
         return True
      open_req = self.put(
         url,
         params=params,
         allow_redirects=False,
         headers={'Content-Length' : '0'})
      if open_req.status_code==307:
         location = open_req.headers['Location']
         req = self.put(
            location,
            data=data,
            headers=headers)
         if req.status_code!=201:
            raise ServiceError(req.status_code,'Cannot copy to path {}'.format(path),req)
      else:
         raise ServiceError(open_req.status_code,'Cannot open path {}'.format(path),open_req)
      return True
